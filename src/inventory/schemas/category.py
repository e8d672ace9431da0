from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CategoryRef(BaseModel):
    """Category as embedded in a product: id and name only."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class CategoryRead(CategoryRef):
    created_at: datetime = Field(serialization_alias="createdAt")
