from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .category import CategoryRef


class ProductCreate(BaseModel):
    """Validated, trimmed body of POST /api/products."""
    name: str
    description: str
    quantity: int = Field(ge=0)
    categories: list[str] = Field(min_length=1)


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    quantity: int
    categories: list[CategoryRef]
    created_at: datetime = Field(serialization_alias="createdAt")


class Pagination(BaseModel):
    current_page: int = Field(serialization_alias="currentPage")
    total_pages: int = Field(serialization_alias="totalPages")
    total_products: int = Field(serialization_alias="totalProducts")
    limit: int
