"""
Repository layer initialization module.

Usage:
    from inventory.repositories import ProductRepository, CategoryRepository
"""

from .base_repository import BaseRepository
from .product_repository import ProductRepository
from .category_repository import CategoryRepository

__all__ = [
    "BaseRepository",
    "ProductRepository",
    "CategoryRepository",
]
