"""
Product use cases: create, list (filtered, paginated) and delete.

Services own the unit of work: repositories flush, the service commits. Business
rule violations are raised as AppError subclasses and left to propagate to the
route, which hands them to the classifier.
"""
import logging
import math
import re
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from inventory.database.identifiers import ensure_object_id, is_object_id
from inventory.exceptions.adapter import db_error_handler
from inventory.exceptions.base import bad_request, conflict
from inventory.models import Product
from inventory.repositories import CategoryRepository, ProductRepository
from inventory.schemas.product import ProductCreate

logger = logging.getLogger(__name__)

PAGE_SIZE = 10

_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")


def parse_page(raw: str | None) -> int:
    """
    Page number from the query string: leading integer digits win ("2abc" -> 2),
    anything unparseable or below 1 becomes 1.
    """
    if raw is None:
        return 1
    match = _LEADING_INT.match(raw)
    if not match:
        return 1
    return max(1, int(match.group(1)))


def parse_category_filter(raw: str | None) -> list[str]:
    """
    Split a comma-separated category filter into ids.

    Raises:
        KnownFailure(INVALID_IDENTIFIER): for the first id that is not 24 hex characters
    """
    if not raw:
        return []
    return [ensure_object_id(part, "categories") for part in raw.split(",")]


@dataclass
class ProductPage:
    products: list[Product]
    current_page: int
    total_pages: int
    total_products: int
    limit: int = PAGE_SIZE


class ProductService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.products = ProductRepository(db)
        self.categories = CategoryRepository(db)

    async def create_product(self, payload: ProductCreate) -> Product:
        """
        Create a product from an already validated payload.

        Raises:
            ConflictError: a product with the same name (ignoring case) exists
            BadRequestError: not every supplied category id resolves; repeated ids count as missing
            KnownFailure(DUPLICATE_KEY): a concurrent insert won the race past the pre-check
        """
        existing = await self.products.find_by_name_insensitive(payload.name)
        if existing is not None:
            conflict("A product with this name already exists")

        category_ids = [category_id.lower() for category_id in payload.categories]
        found = await self.categories.find_by_ids(category_ids)
        if len(found) != len(category_ids):
            bad_request("One or more categories do not exist")

        by_id = {category.id: category for category in found}
        ordered = [by_id[category_id] for category_id in category_ids]

        product = await self.products.create_with_categories(
            name=payload.name,
            description=payload.description,
            quantity=payload.quantity,
            categories=ordered,
        )

        async with db_error_handler(self.db, "Product", values={"name": payload.name}):
            await self.db.commit()

        logger.info("product.created", extra={"id": product.id, "product_name": product.name})
        return product

    async def list_products(
        self,
        page: str | None = None,
        search: str | None = None,
        categories: str | None = None,
    ) -> ProductPage:
        """
        One page of products, newest first.

        Args are the raw query-string values.

        Raises:
            BadRequestError: the page is beyond the last one (only when there is at least one page)
            KnownFailure(INVALID_IDENTIFIER): a category filter id is malformed
        """
        page_number = parse_page(page)
        term = search.strip() if search else ""
        category_ids = parse_category_filter(categories)

        total = await self.products.count_matching(term or None, category_ids or None)
        total_pages = math.ceil(total / PAGE_SIZE)

        if page_number > total_pages and total_pages > 0:
            bad_request(f"Page {page_number} does not exist. Total pages: {total_pages}")

        products = await self.products.search(
            page=page_number,
            limit=PAGE_SIZE,
            search=term or None,
            category_ids=category_ids or None,
        )

        return ProductPage(
            products=products,
            current_page=page_number,
            total_pages=total_pages,
            total_products=total,
        )

    async def delete_product(self, product_id: str) -> Product:
        """
        Delete a product and return it as it was, categories expanded.

        Raises:
            BadRequestError: `product_id` is not 24 hex characters
            NotFoundError: no product has that id
        """
        if not is_object_id(product_id):
            bad_request("Invalid product ID format")

        product = await self.products.get_by_id_or_raise(product_id.lower(), "Product not found")

        await self.products.delete_product(product)
        async with db_error_handler(self.db, "Product"):
            await self.db.commit()

        logger.info("product.deleted", extra={"id": product.id})
        return product
