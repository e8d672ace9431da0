"""
Centralised error classifier.

Every route catches at its boundary and hands the failure here together with a
context label such as "ProductService.create_product". The classifier turns it into a
stable `{success, statusCode, message}` result and logs one diagnostic line.

Matching is a single ordered pass, first match wins:

1. `AppError`  -> its own status and message, verbatim
2. anything the adapter recognises -> matched on `FailureKind`
3. everything else -> 500 "unexpected"
"""
import logging
import traceback
from dataclasses import dataclass
from typing import Any

from .adapter import translate_exception
from .base import AppError
from .failures import FailureKind, KnownFailure

logger = logging.getLogger(__name__)


UNEXPECTED_MESSAGE = "An unexpected error occurred while processing your request"

# Kinds that point at the server or its dependencies rather than the client; logged with traceback.
SERVER_SIDE_KINDS = frozenset(
    {
        FailureKind.STORAGE_UNAVAILABLE,
        FailureKind.STORAGE_TIMEOUT,
        FailureKind.STORAGE_ERROR,
        FailureKind.TYPE_MISMATCH,
        FailureKind.CONNECTION_REFUSED,
        FailureKind.PERMISSION_DENIED,
        FailureKind.STORAGE_EXHAUSTED,
    }
)

_FIXED_MESSAGES: dict[FailureKind, tuple[int, str]] = {
    FailureKind.DOCUMENT_NOT_FOUND: (404, "Requested document not found"),
    FailureKind.CONCURRENT_MODIFICATION: (409, "Document was modified by another process. Please try again."),
    FailureKind.STORAGE_UNAVAILABLE: (503, "Database connection failed. Please try again later."),
    FailureKind.STORAGE_TIMEOUT: (408, "Database operation timed out. Please try again."),
    FailureKind.STORAGE_ERROR: (500, "A database error occurred while processing your request"),
    FailureKind.MALFORMED_BODY: (400, "Invalid JSON format in request body"),
    FailureKind.CONNECTION_TIMEOUT: (408, "Request timeout. Please try again."),
    FailureKind.CONNECTION_REFUSED: (503, "Unable to connect to external service"),
    FailureKind.RESOURCE_NOT_FOUND: (404, "File or directory not found"),
    FailureKind.PERMISSION_DENIED: (403, "Permission denied"),
    FailureKind.STORAGE_EXHAUSTED: (500, "Insufficient storage space"),
}


@dataclass(frozen=True)
class ErrorResult:
    status_code: int
    message: str
    success: bool = False

    def to_payload(self) -> dict:
        return {
            "success": self.success,
            "statusCode": self.status_code,
            "message": self.message,
        }


def _upstream_result(failure: KnownFailure) -> ErrorResult | None:
    status = failure.upstream_status
    detail = failure.detail
    if status == 400:
        return ErrorResult(400, f"External API error: {detail}")
    if status == 401:
        return ErrorResult(401, f"External API authentication failed: {detail}")
    if status == 403:
        return ErrorResult(403, f"External API access denied: {detail}")
    if status == 404:
        return ErrorResult(404, f"External API resource not found: {detail}")
    if status in (408, 504):
        return ErrorResult(408, f"External API timeout: {detail}")
    if status is not None and status >= 500:
        return ErrorResult(503, f"External API unavailable: {detail}")
    return None


def result_for_failure(failure: KnownFailure) -> ErrorResult | None:
    """Map a KnownFailure to its response, or None when the kind has no rule for this shape."""
    kind = failure.kind

    if kind is FailureKind.FIELD_VALIDATION:
        return ErrorResult(400, f"Validation Error: {', '.join(failure.messages)}")

    if kind is FailureKind.INVALID_IDENTIFIER:
        return ErrorResult(400, f"Invalid {failure.expected} for field '{failure.field}': {failure.value}")

    if kind is FailureKind.DUPLICATE_KEY:
        return ErrorResult(409, f"Duplicate Entry: {failure.field} '{failure.value}' already exists")

    if kind is FailureKind.TYPE_MISMATCH:
        return ErrorResult(400, f"Invalid data type: {failure.detail}")

    if kind is FailureKind.OUT_OF_RANGE:
        return ErrorResult(400, f"Value out of range: {failure.detail}")

    if kind is FailureKind.UPSTREAM_HTTP:
        return _upstream_result(failure)

    fixed = _FIXED_MESSAGES.get(kind)
    if fixed is not None:
        return ErrorResult(*fixed)
    return None


class ErrorClassifier:
    """
    Turns any exception into an ErrorResult and logs it.

    `expose_details` only affects `debug_info()`; the classified message never
    carries internal detail beyond what the table above allows.
    """

    def __init__(self, expose_details: bool = False):
        self.expose_details = expose_details

    def classify(self, error: BaseException, context: str = "") -> ErrorResult:
        extra: dict[str, Any] = {"context": context, "error_type": type(error).__name__}

        if isinstance(error, AppError):
            result = ErrorResult(error.status_code, error.message)
            logger.info(
                "%s: %s",
                context,
                error.message,
                extra={**extra, "status_code": result.status_code, "failure_kind": error.kind.value},
            )
            return result

        failure = translate_exception(error)
        result = result_for_failure(failure) if failure is not None else None

        if result is None:
            result = ErrorResult(500, UNEXPECTED_MESSAGE)
            logger.error(
                "%s: unexpected error: %s",
                context,
                error,
                exc_info=error,
                extra={**extra, "status_code": 500, "failure_kind": "unexpected"},
            )
            return result

        log_extra = {**extra, "status_code": result.status_code, "failure_kind": failure.kind.value}
        if failure.kind in SERVER_SIDE_KINDS:
            logger.error("%s: %s", context, failure.detail or result.message, exc_info=error, extra=log_extra)
        else:
            logger.info("%s: %s", context, result.message, extra=log_extra)
        return result

    def debug_info(self, error: BaseException) -> dict | None:
        """`{name, message, stack}` for development responses; None when details are hidden."""
        if not self.expose_details:
            return None
        return {
            "name": type(error).__name__,
            "message": str(error),
            "stack": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
        }


_default_classifier = ErrorClassifier()


def classify_error(error: BaseException, context: str = "") -> ErrorResult:
    """Classify with a detail-hiding classifier; handy outside a request."""
    return _default_classifier.classify(error, context)


__all__ = [
    "UNEXPECTED_MESSAGE",
    "ErrorResult",
    "ErrorClassifier",
    "result_for_failure",
    "classify_error",
]
