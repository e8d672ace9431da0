"""
Base repository class providing common database operations.

This class serves as a reusable foundation for repositories that interact with
the database using SQLAlchemy's async sessions.

Every query runs inside `db_error_handler`, so callers only ever see a
`KnownFailure` (storage problems) or an `AppError` (e.g. `get_by_id_or_raise`),
never a raw driver exception.

Repositories flush but never commit; the service layer owns the transaction.
"""
import logging
import time
from typing import Generic, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.database.base import Base
from inventory.exceptions.adapter import db_error_handler
from inventory.exceptions.base import not_found

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (not an instance), e.g. Product
            db: The async database session, usually request-scoped
        """
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, **kwargs) -> ModelType:
        """
        Insert an entity and flush so generated columns (id, created_at) are populated.

        Logging:
        - DEBUG: start event with the provided keys (not values).
        - INFO: success event with created id and duration_ms.

        Raises:
            KnownFailure: DUPLICATE_KEY / FIELD_VALIDATION / STORAGE_* as translated by the adapter.
        """
        logger.debug(
            "repo.create.start",
            extra={
                "model": self.model_name,
                "operation": "create",
                "provided_keys": sorted(kwargs.keys()),
            },
        )

        start = time.perf_counter()

        async with db_error_handler(self.db, self.model_name, values=kwargs):
            entity = self.model(**kwargs)
            self.db.add(entity)
            await self.db.flush()

        logger.info(
            "repo.create.success",
            extra={
                "model": self.model_name,
                "operation": "create",
                "id": getattr(entity, "id", None),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    # =================================================================================================================
    # Read (single entity)
    # =================================================================================================================

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """
        Get an entity by its ID.

        Returns:
            The entity if found, otherwise None
        """
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(
                select(self.model).where(self.model.id == entity_id)
            )
            entity = result.scalar_one_or_none()

        logger.debug("repo.get_by_id", extra={"model": self.model_name, "id": entity_id, "found": entity is not None})
        return entity

    async def get_by_id_or_raise(self, entity_id: str, message: str | None = None) -> ModelType:
        """
        Get an entity by its ID or raise NotFoundError.

        Raises:
            NotFoundError: If no row has that id. `message` overrides the default text.
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            not_found(message or f"{self.model_name} not found")
        return entity

    # =================================================================================================================
    # Read (many)
    # =================================================================================================================

    async def get_all(
        self,
        offset: int = 0,                # Used for pagination: how many records to skip
        limit: int | None = 100,        # Max number of records to return; None for all
        order_by: str | None = None     # Optional: field to sort results by
    ) -> list[ModelType]:
        """
        Get all entities with optional ordering and pagination.

        Defaults to newest first when the model has `created_at` and no `order_by` is given.
        """
        query = select(self.model)

        if order_by:
            if hasattr(self.model, order_by):
                query = query.order_by(getattr(self.model, order_by))
            else:
                logger.warning(
                    "repo.get_all.invalid_order_by",
                    extra={"model": self.model_name, "order_by": order_by},
                )
        elif hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at.desc())

        query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            entities = list(result.scalars().all())

        logger.debug("repo.get_all", extra={"model": self.model_name, "count": len(entities)})
        return entities
