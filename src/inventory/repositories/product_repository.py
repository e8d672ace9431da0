"""
Product repository for product-specific database operations.

Extends BaseRepository with the queries the product endpoints need:
case-insensitive name lookup, creation with ordered categories, and the
filtered, paginated listing.
"""
import logging
from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.exceptions.adapter import db_error_handler
from inventory.models import Category, Product, ProductCategory
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ProductRepository(BaseRepository[Product]):
    """
    Repository for Product entity operations.

    Products are always returned with their categories loaded (the relationships
    are `selectin`), so callers can serialise them outside the session.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Product, db)

    # =================================================================================================================
    # Create Operations
    # =================================================================================================================

    async def create_with_categories(
        self,
        name: str,
        description: str,
        quantity: int,
        categories: Sequence[Category],
    ) -> Product:
        """
        Insert a product linked to `categories`, preserving their order.

        Args:
            categories: Already-resolved Category rows, in the order the client sent them

        Raises:
            KnownFailure(DUPLICATE_KEY): the unique index on `name` rejected the insert
        """
        values = {"name": name, "description": description, "quantity": quantity}

        async with db_error_handler(self.db, self.model_name, values=values):
            product = Product(
                **values,
                category_links=[
                    ProductCategory(category=category, position=position)
                    for position, category in enumerate(categories)
                ],
            )
            self.db.add(product)
            await self.db.flush()

        logger.info(
            "repo.product.created",
            extra={"id": product.id, "category_count": len(categories)},
        )
        return product

    # =================================================================================================================
    # Read Operations
    # =================================================================================================================

    async def find_by_name_insensitive(self, name: str) -> Product | None:
        """Return the product whose name equals `name` ignoring case, if any."""
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(
                select(Product).where(func.lower(Product.name) == func.lower(name)).limit(1)
            )
            return result.scalars().first()

    def _filtered(self, query: Select, search: str | None, category_ids: Sequence[str] | None) -> Select:
        if search:
            # Literal substring, not a pattern: % and _ in the term are escaped.
            query = query.where(Product.name.icontains(search, autoescape=True))

        if category_ids:
            linked = select(ProductCategory.product_id).where(ProductCategory.category_id.in_(category_ids))
            query = query.where(Product.id.in_(linked))

        return query

    async def count_matching(
        self,
        search: str | None = None,
        category_ids: Sequence[str] | None = None,
    ) -> int:
        query = self._filtered(select(func.count()).select_from(Product), search, category_ids)

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return result.scalar() or 0

    async def search(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        category_ids: Sequence[str] | None = None,
    ) -> list[Product]:
        """
        One page of products, newest first.

        Args:
            page: 1-based page number
            limit: page size
            search: case-insensitive substring of the product name
            category_ids: keep products linked to at least one of these categories
        """
        query = self._filtered(select(Product), search, category_ids)
        query = (
            query
            .order_by(Product.created_at.desc(), Product.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            products = list(result.scalars().all())

        logger.debug(
            "repo.product.search",
            extra={"page": page, "limit": limit, "search": search, "returned": len(products)},
        )
        return products

    # =================================================================================================================
    # Delete Operations
    # =================================================================================================================

    async def delete_product(self, product: Product) -> Product:
        """
        Delete a loaded product together with its category links.

        Returns the same instance; its attributes stay readable after the flush.
        """
        async with db_error_handler(self.db, self.model_name):
            await self.db.delete(product)
            await self.db.flush()

        logger.info("repo.product.deleted", extra={"id": product.id})
        return product
