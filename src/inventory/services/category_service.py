from sqlalchemy.ext.asyncio import AsyncSession

from inventory.models import Category
from inventory.repositories import CategoryRepository


class CategoryService:

    def __init__(self, db: AsyncSession):
        self.categories = CategoryRepository(db)

    async def list_categories(self) -> list[Category]:
        """Every category, by name ascending."""
        return await self.categories.list_by_name()
