from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.database.session import get_session
from inventory.exceptions.classifier import ErrorClassifier
from inventory.services import CategoryService, ProductService


def get_classifier(request: Request) -> ErrorClassifier:
    return request.app.state.classifier


async def get_product_service(db: AsyncSession = Depends(get_session)) -> ProductService:
    return ProductService(db)


async def get_category_service(db: AsyncSession = Depends(get_session)) -> CategoryService:
    return CategoryService(db)
