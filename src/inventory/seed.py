"""
Category seeding.

    python -m inventory.seed

Replaces every category with the fixed starter list. Products that still
reference old categories make the delete fail on stores that enforce foreign
keys; seed an empty database.
"""
import asyncio
import logging
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from inventory.config.settings import Settings, get_settings
from inventory.core.logging import setup_logging
from inventory.database.session import build_engine, build_session_factory, create_schema
from inventory.exceptions.adapter import db_error_handler
from inventory.exceptions.classifier import classify_error
from inventory.models import Category
from inventory.repositories import CategoryRepository

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    "Electronics",
    "Clothing",
    "Books",
    "Home & Garden",
    "Sports",
    "Beauty",
    "Toys",
    "Food & Beverages",
]


async def seed_categories(session: AsyncSession, names: list[str] = DEFAULT_CATEGORIES) -> list[Category]:
    """Delete all categories, insert `names`, commit. Returns the new rows."""
    repo = CategoryRepository(session)

    removed = await repo.delete_all()
    logger.info("seed.categories.cleared", extra={"deleted": removed})

    created = [await repo.create_category(name) for name in names]

    async with db_error_handler(session, "Category"):
        await session.commit()

    logger.info("seed.categories.done", extra={"count": len(created)})
    return created


async def main(settings: Settings) -> None:
    engine = build_engine(settings)
    try:
        await create_schema(engine)
        async with build_session_factory(engine)() as session:
            await seed_categories(session)
    finally:
        await engine.dispose()


def run() -> int:
    settings = get_settings()
    setup_logging(settings)
    try:
        asyncio.run(main(settings))
    except Exception as exc:
        result = classify_error(exc, "seed_categories")
        logger.error("Error seeding categories: %s", result.message, extra={"status_code": result.status_code})
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(run())
