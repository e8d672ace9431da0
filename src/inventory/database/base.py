"""
Declarative base for every ORM model in the inventory store.

Models inherit `Base` plus `DocumentMixin`, which gives each row the two
columns every stored document carries: a 24-hex `id` and an immutable
`created_at`.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, MetaData, String
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .identifiers import new_object_id

# Naming convention for constraints and indexes. Unique constraints are named
# uq_<table>_<column>, which the failure adapter relies on when a driver only
# reports the constraint name.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC datetimes on every backend.

    SQLite has no timezone support and hands back naive values; those are
    read as UTC so a row serialises the same whether it was just created or
    loaded from the store.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class DocumentMixin:
    # Generated client-side so the id is known before the INSERT is flushed.
    id: Mapped[str] = mapped_column(
        String(24),
        primary_key=True,
        default=new_object_id,
    )

    # Set once on insert. Python-side default keeps sub-second precision on SQLite.
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
