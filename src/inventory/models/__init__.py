r"""
Centralized access to all database models for the inventory service.

Importing from here also registers every table on `Base.metadata`, which
`create_all` (tests, seeding) depends on.

    from inventory.models import Product, Category, ProductCategory
"""

from .category import Category
from .product import Product, ProductCategory

__all__ = [
    "Category",
    "Product",
    "ProductCategory",
]
