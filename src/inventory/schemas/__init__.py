from .category import CategoryRead, CategoryRef
from .product import Pagination, ProductCreate, ProductRead

__all__ = [
    "CategoryRead",
    "CategoryRef",
    "Pagination",
    "ProductCreate",
    "ProductRead",
]
