from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from inventory.core.dependencies import get_category_service, get_classifier
from inventory.exceptions.classifier import ErrorClassifier
from inventory.schemas.category import CategoryRead
from inventory.services import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("")
async def list_categories(
    service: CategoryService = Depends(get_category_service),
    classifier: ErrorClassifier = Depends(get_classifier),
) -> JSONResponse:
    try:
        categories = await service.list_categories()
    except Exception as exc:
        result = classifier.classify(exc, "CategoryService.list_categories")
        return JSONResponse(status_code=result.status_code, content=result.to_payload())

    return JSONResponse(
        content={
            "success": True,
            "data": [
                CategoryRead.model_validate(category).model_dump(mode="json", by_alias=True)
                for category in categories
            ],
        }
    )
