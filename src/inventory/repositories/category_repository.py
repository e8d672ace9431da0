"""
Category repository.

Categories are read-mostly: the API only lists them, products resolve them by
id at creation time, and the seeding script creates them.
"""
import logging
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.exceptions.adapter import db_error_handler
from inventory.models import Category
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CategoryRepository(BaseRepository[Category]):

    def __init__(self, db: AsyncSession):
        super().__init__(Category, db)

    async def create_category(self, name: str) -> Category:
        return await self.create(name=name.strip())

    async def find_by_ids(self, category_ids: Sequence[str]) -> list[Category]:
        """
        Categories whose id is in `category_ids`.

        Each existing category appears once no matter how often its id is repeated;
        order is unspecified.
        """
        if not category_ids:
            return []

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(
                select(Category).where(Category.id.in_(list(dict.fromkeys(category_ids))))
            )
            return list(result.scalars().all())

    async def list_by_name(self) -> list[Category]:
        """All categories, alphabetical by name."""
        return await self.get_all(limit=None, order_by="name")

    async def delete_all(self) -> int:
        """Remove every category; used by seeding only. Returns the number of rows removed."""
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(delete(Category))

        logger.info("repo.category.delete_all", extra={"deleted": result.rowcount})
        return result.rowcount
