"""
FastAPI exception handlers: the global end of the request chain.

Routes classify their own failures. What reaches these handlers escaped from
somewhere else: the body-validation dependency, the session dependency, or
routing itself.

    - RequestValidationFailed -> 400 {success, message: "Validation failed", errors}
    - 404 / 405 from routing   -> 404 {success, message: "Route not found"}
    - AppError / KnownFailure  -> classifier result
    - anything else            -> classifier result (500), plus `error` debug block in development

Register from the app factory with `register_exception_handlers(app)`.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventory.exceptions.base import AppError
from inventory.exceptions.classifier import ErrorClassifier
from inventory.exceptions.failures import KnownFailure
from inventory.validators.product_validators import RequestValidationFailed

logger = logging.getLogger(__name__)

GLOBAL_CONTEXT = "GlobalErrorHandler"


def _classifier(request: Request) -> ErrorClassifier:
    return request.app.state.classifier


async def request_validation_handler(request: Request, exc: RequestValidationFailed) -> JSONResponse:
    """
    400 with every violated rule.
    """
    logger.info(
        "Validation failed for %s %s",
        request.method,
        request.url.path,
        extra={"fields": [error["field"] for error in exc.errors]},
    )
    return JSONResponse(status_code=400, content=exc.to_payload())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unmatched path and unmatched method both read as "no such route".
    if exc.status_code in (404, 405):
        logger.info("Route not found: %s %s", request.method, request.url.path)
        return JSONResponse(status_code=404, content={"success": False, "message": "Route not found"})

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "statusCode": exc.status_code, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def _classified_response(request: Request, exc: Exception) -> JSONResponse:
    classifier = _classifier(request)
    result = classifier.classify(exc, GLOBAL_CONTEXT)
    content = result.to_payload()

    debug = classifier.debug_info(exc)
    if debug is not None:
        content["error"] = debug

    return JSONResponse(status_code=result.status_code, content=content)


async def known_error_handler(request: Request, exc: AppError | KnownFailure) -> JSONResponse:
    """
    AppError or KnownFailure raised outside a route's own try block (e.g. malformed JSON body).
    """
    return _classified_response(request, exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last resort. Starlette re-raises the exception after sending this response,
    so the server log also records it.
    """
    return _classified_response(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationFailed, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(AppError, known_error_handler)
    app.add_exception_handler(KnownFailure, known_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
