"""
Logging filters.

RequestIdFilter stamps every record with the id of the HTTP request it was
emitted under, read from a ContextVar so the value follows the request across
awaits. Records emitted outside a request (startup, seeding) get "-".

RedactFilter masks attributes whose name marks them as credentials.
"""

import contextvars
import logging
from logging import LogRecord

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context.

    Returns:
        token: pass to reset_request_id(token) to restore the previous value
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantees `record.request_id` exists.

    Precedence: an explicit `extra={"request_id": ...}`, then the contextvar,
    then "-". Never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = {
        "password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "database_url",  # carries credentials in the DSN
    }

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = "***REDACTED***"
        return True
