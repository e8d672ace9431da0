from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from inventory.database.base import Base, DocumentMixin


class Category(DocumentMixin, Base):
    """
    SQLAlchemy model for a Category.

    Categories are seeded, never created or deleted through the API. Products
    reference them through `ProductCategory`.
    """
    __tablename__ = "categories"

    # Exact-match unique; callers trim before storing
    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id!r}, name={self.name!r})>"
