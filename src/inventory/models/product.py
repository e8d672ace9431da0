from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory.database.base import Base, DocumentMixin
from .category import Category


class ProductCategory(Base):
    """
    Association row between a product and one of its categories.

    `position` keeps the order in which the client listed the categories.
    """
    __tablename__ = "product_categories"

    product_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True
    )

    category_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("categories.id"),
        primary_key=True,
        index=True  # category filter on the product listing
    )

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Many-to-One: always needed when a product is serialised
    category: Mapped["Category"] = relationship("Category", lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<ProductCategory(product_id={self.product_id!r}, "
            f"category_id={self.category_id!r}, position={self.position!r})>"
        )


class Product(DocumentMixin, Base):
    """
    SQLAlchemy model for a Product.

    A product has a unique name, a description, a non-negative quantity and an
    ordered, non-empty list of categories fixed at creation time.
    """
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
    )

    # Unique as stored; the case-insensitive check happens before insert
    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False
    )

    description: Mapped[str] = mapped_column(
        String(500),
        nullable=False
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )

    # --- Relationships ---

    # One-to-Many: association rows, in client order
    category_links: Mapped[list["ProductCategory"]] = relationship(
        "ProductCategory",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ProductCategory.position"
    )

    @property
    def categories(self) -> list[Category]:
        return [link.category for link in self.category_links]

    def __repr__(self) -> str:
        return f"<Product(id={self.id!r}, name={self.name!r}, quantity={self.quantity!r})>"
