from enum import Enum
from typing import Any

# =================================================================================================================
# Known failure kinds
# =================================================================================================================
#
# Store- and transport-specific exceptions (SQLAlchemy, OSError, httpx, pydantic, json) are translated into
# one of these kinds by `inventory.exceptions.adapter` before the classifier sees them. The classifier only
# matches on `FailureKind`; it never inspects driver exceptions itself.
#
# Declaration order is the classification order.


class FailureKind(str, Enum):
    FIELD_VALIDATION = "field_validation"
    INVALID_IDENTIFIER = "invalid_identifier"
    DUPLICATE_KEY = "duplicate_key"
    DOCUMENT_NOT_FOUND = "document_not_found"
    CONCURRENT_MODIFICATION = "concurrent_modification"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    STORAGE_TIMEOUT = "storage_timeout"
    STORAGE_ERROR = "storage_error"
    MALFORMED_BODY = "malformed_body"
    TYPE_MISMATCH = "type_mismatch"
    OUT_OF_RANGE = "out_of_range"
    CONNECTION_TIMEOUT = "connection_timeout"
    CONNECTION_REFUSED = "connection_refused"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERMISSION_DENIED = "permission_denied"
    STORAGE_EXHAUSTED = "storage_exhausted"
    UPSTREAM_HTTP = "upstream_http"


# =================================================================================================================
# Translated failure
# =================================================================================================================


class KnownFailure(Exception):
    """
    A failure whose shape is known, tagged with a FailureKind.

    Kind-specific detail travels as keyword attributes; only the ones the kind
    uses are set:

    | Kind                 | Attributes                                |
    | -------------------- | ----------------------------------------- |
    | FIELD_VALIDATION     | messages                                  |
    | INVALID_IDENTIFIER   | field, value, expected                    |
    | DUPLICATE_KEY        | field, value                              |
    | TYPE_MISMATCH        | detail                                    |
    | OUT_OF_RANGE         | detail                                    |
    | UPSTREAM_HTTP        | upstream_status, detail                   |

    `detail` (the raw message) is for logs; the classifier decides what reaches the client.
    """

    def __init__(
        self,
        kind: FailureKind,
        detail: str = "",
        *,
        field: str | None = None,
        value: Any = None,
        expected: str | None = None,
        messages: list[str] | None = None,
        upstream_status: int | None = None,
    ):
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail
        self.field = field
        self.value = value
        self.expected = expected
        self.messages = list(messages) if messages else []
        self.upstream_status = upstream_status

    def __repr__(self) -> str:
        return f"<KnownFailure(kind={self.kind.value!r}, detail={self.detail!r})>"


__all__ = ["FailureKind", "KnownFailure"]
