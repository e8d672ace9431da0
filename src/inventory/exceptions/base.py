"""
Application-raised failures.

Handlers and services raise these to signal business-rule violations
("name already exists", "page out of range") and let them propagate to the
route boundary, where the classifier turns them into a response. The set of
kinds is closed: every AppError is one of the seven subclasses below, each
with a fixed HTTP status.
"""

from enum import Enum
from typing import NoReturn


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"


class AppError(Exception):
    """
    Base for application-raised failures.

    - message: human-friendly message, returned to the client verbatim
    - kind: one of ErrorKind
    - status_code: HTTP status that accompanies the message

    Catch `AppError` to tell business-rule failures apart from storage or
    runtime failures; the classifier checks it before anything else.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.message} (status: {self.status_code})"


class BadRequestError(AppError):
    kind = ErrorKind.BAD_REQUEST
    status_code = 400
    default_message = "Bad Request"


class UnauthorizedError(AppError):
    kind = ErrorKind.UNAUTHORIZED
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT
    status_code = 409
    default_message = "Conflict"


class InternalError(AppError):
    kind = ErrorKind.INTERNAL
    status_code = 500
    default_message = "Internal Server Error"


class ServiceUnavailableError(AppError):
    kind = ErrorKind.UNAVAILABLE
    status_code = 503
    default_message = "Service Unavailable"


# -----------------------
# Raise helpers
# -----------------------

def bad_request(message: str) -> NoReturn:
    raise BadRequestError(message)


def unauthorized(message: str = "Unauthorized") -> NoReturn:
    raise UnauthorizedError(message)


def forbidden(message: str = "Forbidden") -> NoReturn:
    raise ForbiddenError(message)


def not_found(message: str = "Resource not found") -> NoReturn:
    raise NotFoundError(message)


def conflict(message: str) -> NoReturn:
    raise ConflictError(message)


def internal_error(message: str = "Internal Server Error") -> NoReturn:
    raise InternalError(message)


def service_unavailable(message: str = "Service Unavailable") -> NoReturn:
    raise ServiceUnavailableError(message)


__all__ = [
    "ErrorKind",
    "AppError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
    "ServiceUnavailableError",
    "bad_request",
    "unauthorized",
    "forbidden",
    "not_found",
    "conflict",
    "internal_error",
    "service_unavailable",
]
