# inventory/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # Application-raised errors (closed set, one per status)
# │   ├── failures.py                # Known failure kinds produced by the adapter
# │   ├── adapter.py                 # Translate SQLAlchemy / OSError / httpx / pydantic errors to known failures
# │   └── classifier.py              # Ordered match: failure -> {success, statusCode, message}

from .base import (
    AppError,
    BadRequestError,
    ConflictError,
    ErrorKind,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ServiceUnavailableError,
    UnauthorizedError,
    bad_request,
    conflict,
    forbidden,
    internal_error,
    not_found,
    service_unavailable,
    unauthorized,
)
from .failures import FailureKind, KnownFailure
from .adapter import db_error_handler, translate_exception
from .classifier import ErrorClassifier, ErrorResult, classify_error

__all__ = [
    "AppError",
    "BadRequestError",
    "ConflictError",
    "ErrorKind",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "ServiceUnavailableError",
    "UnauthorizedError",
    "bad_request",
    "conflict",
    "forbidden",
    "internal_error",
    "not_found",
    "service_unavailable",
    "unauthorized",
    "FailureKind",
    "KnownFailure",
    "db_error_handler",
    "translate_exception",
    "ErrorClassifier",
    "ErrorResult",
    "classify_error",
]
