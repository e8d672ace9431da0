from .category_service import CategoryService
from .product_service import PAGE_SIZE, ProductPage, ProductService, parse_page

__all__ = [
    "CategoryService",
    "PAGE_SIZE",
    "ProductPage",
    "ProductService",
    "parse_page",
]
