"""
/api/products routes.

Each route catches at its boundary and turns the failure into a response through
the classifier, labelled with the service operation it was running.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from inventory.core.dependencies import get_classifier, get_product_service
from inventory.exceptions.classifier import ErrorClassifier
from inventory.schemas.product import Pagination, ProductCreate, ProductRead
from inventory.services import ProductService
from inventory.validators.product_validators import validate_product_body

router = APIRouter(prefix="/products", tags=["products"])


def _product_json(product) -> dict:
    return ProductRead.model_validate(product).model_dump(mode="json", by_alias=True)


@router.post("")
async def create_product(
    payload: ProductCreate = Depends(validate_product_body),
    service: ProductService = Depends(get_product_service),
    classifier: ErrorClassifier = Depends(get_classifier),
) -> JSONResponse:
    try:
        product = await service.create_product(payload)
    except Exception as exc:
        result = classifier.classify(exc, "ProductService.create_product")
        return JSONResponse(status_code=result.status_code, content=result.to_payload())

    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "message": "Product added successfully",
            "data": _product_json(product),
        },
    )


@router.get("")
async def list_products(
    page: str | None = None,
    search: str | None = None,
    categories: str | None = None,
    service: ProductService = Depends(get_product_service),
    classifier: ErrorClassifier = Depends(get_classifier),
) -> JSONResponse:
    # Query values stay raw strings; the service applies the lenient page parsing.
    try:
        result_page = await service.list_products(page=page, search=search, categories=categories)
    except Exception as exc:
        result = classifier.classify(exc, "ProductService.list_products")
        return JSONResponse(status_code=result.status_code, content=result.to_payload())

    pagination = Pagination(
        current_page=result_page.current_page,
        total_pages=result_page.total_pages,
        total_products=result_page.total_products,
        limit=result_page.limit,
    )
    return JSONResponse(
        content={
            "success": True,
            "data": [_product_json(product) for product in result_page.products],
            "pagination": pagination.model_dump(by_alias=True),
        }
    )


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
    classifier: ErrorClassifier = Depends(get_classifier),
) -> JSONResponse:
    try:
        product = await service.delete_product(product_id)
    except Exception as exc:
        result = classifier.classify(exc, "ProductService.delete_product")
        return JSONResponse(status_code=result.status_code, content=result.to_payload())

    return JSONResponse(
        content={
            "success": True,
            "message": "Product deleted successfully",
            "data": _product_json(product),
        }
    )
