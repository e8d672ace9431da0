"""
Failure adapter: the one place that knows what store- and transport-specific
exceptions look like.

Two entry points:

- `db_error_handler(session, model_name, values=...)` wraps repository calls.
  Anything the persistence layer raises is rolled back and re-raised as a
  `KnownFailure` tagged with the matching FailureKind.
- `translate_exception(exc)` is used by the classifier for everything else
  (body parsing, pydantic, OSError family, httpx). It returns None for
  exceptions it does not recognise; those are "unexpected".

| Raised                                        | FailureKind              |
| --------------------------------------------- | ------------------------ |
| pydantic.ValidationError                      | FIELD_VALIDATION         |
| IntegrityError (unique / pgcode 23505)        | DUPLICATE_KEY            |
| IntegrityError (not-null / check / fk)        | FIELD_VALIDATION         |
| NoResultFound                                 | DOCUMENT_NOT_FOUND       |
| StaleDataError                                | CONCURRENT_MODIFICATION  |
| OperationalError / InterfaceError (connect)   | STORAGE_UNAVAILABLE      |
| sqlalchemy TimeoutError, statement timeout    | STORAGE_TIMEOUT          |
| any other SQLAlchemyError                     | STORAGE_ERROR            |
| json.JSONDecodeError                          | MALFORMED_BODY           |
| TypeError                                     | TYPE_MISMATCH            |
| OverflowError                                 | OUT_OF_RANGE             |
| TimeoutError, ETIMEDOUT, httpx timeouts       | CONNECTION_TIMEOUT       |
| ECONNREFUSED, DNS failure, httpx.ConnectError | CONNECTION_REFUSED       |
| FileNotFoundError / ENOENT                    | RESOURCE_NOT_FOUND       |
| PermissionError / EACCES / EPERM              | PERMISSION_DENIED        |
| ENOSPC                                        | STORAGE_EXHAUSTED        |
| httpx.HTTPStatusError                         | UPSTREAM_HTTP            |
"""
import errno
import json
import logging
import re
import socket
from contextlib import asynccontextmanager
from typing import Any, Mapping

import httpx
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from .base import AppError
from .failures import FailureKind, KnownFailure

logger = logging.getLogger(__name__)


# https://www.postgresql.org/docs/current/errcodes-appendix.html
PG_UNIQUE_VIOLATION = "23505"
PG_NOT_NULL_VIOLATION = "23502"
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_CHECK_VIOLATION = "23514"
PG_QUERY_CANCELED = "57014"  # statement_timeout

_TIMEOUT_ERRNOS = {errno.ETIMEDOUT, errno.ECONNABORTED}
_REFUSED_ERRNOS = {errno.ECONNREFUSED, errno.EHOSTUNREACH, errno.ENETUNREACH}
_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM}


# -----------------------
# Integrity error helpers
# -----------------------

def _pgcode(orig) -> str | None:
    # psycopg exposes pgcode, asyncpg sqlstate; SQLAlchemy's asyncpg adapter copies it to pgcode.
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _match_any(msg: str, keywords: list[str]) -> bool:
    return any(keyword in msg for keyword in keywords)


def _classify_integrity(exc: IntegrityError) -> str:
    """Return 'unique', 'not_null', 'foreign_key', 'check' or 'unknown'."""
    orig = exc.orig
    code = _pgcode(orig)
    if code == PG_UNIQUE_VIOLATION:
        return "unique"
    if code == PG_NOT_NULL_VIOLATION:
        return "not_null"
    if code == PG_FOREIGN_KEY_VIOLATION:
        return "foreign_key"
    if code == PG_CHECK_VIOLATION:
        return "check"

    # Fallback to message parsing (SQLite, MySQL, drivers without codes)
    normalized = str(orig if orig is not None else exc).lower()
    if _match_any(normalized, ["unique constraint", "unique failed", "unique violation", "duplicate"]):
        return "unique"
    if _match_any(normalized, ["not null constraint", "not null", "null value in column"]):
        return "not_null"
    if _match_any(normalized, ["foreign key constraint", "foreign key", "is not present in table"]):
        return "foreign_key"
    if _match_any(normalized, ["check constraint", "check failed"]):
        return "check"
    return "unknown"


def extract_conflict(msg: str) -> tuple[list[str] | None, str | None]:
    """
    Best-effort extraction of the conflicting column(s) and value from a driver message.

      - Postgres: 'DETAIL:  Key (name)=(Widget) already exists.'  -> (["name"], "Widget")
      - Postgres: 'null value in column "name" ...'                 -> (["name"], None)
      - SQLite:   'UNIQUE constraint failed: products.name'         -> (["name"], None)
      - SQLite:   'NOT NULL constraint failed: products.name'       -> (["name"], None)
    """
    if not msg:
        return None, None

    m = re.search(r'key \((?P<cols>[^)]+)\)=\((?P<vals>.*?)\)(?: already exists)?', msg, flags=re.IGNORECASE)
    if m:
        cols = [c.strip().strip('"') for c in m.group("cols").split(",")]
        return cols, m.group("vals")

    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")], None

    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>[^\n]+)', msg, flags=re.IGNORECASE)
    if m:
        cols = [c.split(".")[-1].strip() for c in re.split(r",\s*", m.group("cols").strip())]
        return cols, None

    m = re.search(r'constraint "uq_(?P<table>[a-z0-9]+)_(?P<col>[a-z0-9_]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")], None

    return None, None


def _translate_integrity(exc: IntegrityError, values: Mapping[str, Any] | None) -> KnownFailure:
    category = _classify_integrity(exc)
    raw = str(exc.orig) if exc.orig is not None else str(exc)
    columns, value = extract_conflict(raw)

    if category == "unique":
        field = columns[0] if columns else "value"
        if value is None and values is not None:
            value = values.get(field)
        return KnownFailure(FailureKind.DUPLICATE_KEY, raw, field=field, value=value)

    if category == "not_null":
        cols = columns or ["field"]
        return KnownFailure(
            FailureKind.FIELD_VALIDATION,
            raw,
            messages=[f"{col} is required" for col in cols],
        )

    if category == "foreign_key":
        return KnownFailure(
            FailureKind.FIELD_VALIDATION,
            raw,
            messages=["Referenced document does not exist"],
        )

    if category == "check":
        return KnownFailure(
            FailureKind.FIELD_VALIDATION,
            raw,
            messages=["Value violates a storage rule"],
        )

    return KnownFailure(FailureKind.STORAGE_ERROR, raw)


_CONNECTIVITY_HINTS = [
    "could not connect",
    "connection refused",
    "connection reset",
    "connection is closed",
    "server closed the connection",
    "unable to open database",
    "name or service not known",
    "no route to host",
    "terminating connection",
]
_TIMEOUT_HINTS = ["timeout", "timed out", "statement timeout"]


def translate_persistence_error(exc: BaseException, values: Mapping[str, Any] | None = None) -> KnownFailure:
    """
    Translate an exception raised inside the persistence boundary.

    Unlike `translate_exception`, every exception maps to some storage kind here:
    an OSError while talking to the store is a connectivity problem, not a local file problem.
    """
    if isinstance(exc, KnownFailure):
        return exc

    if isinstance(exc, IntegrityError):
        return _translate_integrity(exc, values)

    if isinstance(exc, NoResultFound):
        return KnownFailure(FailureKind.DOCUMENT_NOT_FOUND, str(exc))

    if isinstance(exc, StaleDataError):
        return KnownFailure(FailureKind.CONCURRENT_MODIFICATION, str(exc))

    if isinstance(exc, PoolTimeoutError):
        return KnownFailure(FailureKind.STORAGE_TIMEOUT, str(exc))

    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError)):
        raw = str(getattr(exc, "orig", None) or exc)
        normalized = raw.lower()
        if _pgcode(getattr(exc, "orig", None)) == PG_QUERY_CANCELED or _match_any(normalized, _TIMEOUT_HINTS):
            return KnownFailure(FailureKind.STORAGE_TIMEOUT, raw)
        if (
            isinstance(exc, (InterfaceError, DisconnectionError))
            or getattr(exc, "connection_invalidated", False)
            or _match_any(normalized, _CONNECTIVITY_HINTS)
        ):
            return KnownFailure(FailureKind.STORAGE_UNAVAILABLE, raw)
        return KnownFailure(FailureKind.STORAGE_ERROR, raw)

    if isinstance(exc, SQLAlchemyError):
        return KnownFailure(FailureKind.STORAGE_ERROR, str(exc))

    # Driver-level socket errors surface unwrapped when the first connection is opened.
    if isinstance(exc, TimeoutError):
        return KnownFailure(FailureKind.STORAGE_TIMEOUT, str(exc) or "timed out")

    if isinstance(exc, OSError):
        return KnownFailure(FailureKind.STORAGE_UNAVAILABLE, str(exc))

    return KnownFailure(FailureKind.STORAGE_ERROR, str(exc))


# -----------------------
# General adapter
# -----------------------

def _validation_messages(exc: PydanticValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return messages


def _upstream_message(exc: httpx.HTTPStatusError) -> str:
    # Prefer the upstream's own {"message": "..."} body, fall back to the exception text.
    try:
        body = exc.response.json()
    except (ValueError, UnicodeDecodeError):
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return str(exc)


def _translate_os_error(exc: OSError) -> KnownFailure | None:
    code = exc.errno

    if isinstance(exc, (TimeoutError, ConnectionAbortedError)) or code in _TIMEOUT_ERRNOS:
        return KnownFailure(FailureKind.CONNECTION_TIMEOUT, str(exc))

    if isinstance(exc, (ConnectionRefusedError, socket.gaierror)) or code in _REFUSED_ERRNOS:
        return KnownFailure(FailureKind.CONNECTION_REFUSED, str(exc))

    if isinstance(exc, FileNotFoundError) or code == errno.ENOENT:
        return KnownFailure(FailureKind.RESOURCE_NOT_FOUND, str(exc))

    if isinstance(exc, PermissionError) or code in _PERMISSION_ERRNOS:
        return KnownFailure(FailureKind.PERMISSION_DENIED, str(exc))

    if code == errno.ENOSPC:
        return KnownFailure(FailureKind.STORAGE_EXHAUSTED, str(exc))

    return None


def translate_exception(exc: BaseException) -> KnownFailure | None:
    """
    Map an arbitrary exception onto a KnownFailure, or None when its shape is unknown.

    Order matters where Python's hierarchy overlaps: pydantic's ValidationError and
    json.JSONDecodeError are both ValueErrors, TimeoutError is an OSError.
    """
    if isinstance(exc, KnownFailure):
        return exc

    if isinstance(exc, AppError):
        # Application-raised failures are classified before translation; never re-tag them.
        return None

    if isinstance(exc, PydanticValidationError):
        return KnownFailure(FailureKind.FIELD_VALIDATION, str(exc), messages=_validation_messages(exc))

    if isinstance(exc, SQLAlchemyError):
        return translate_persistence_error(exc)

    if isinstance(exc, json.JSONDecodeError):
        return KnownFailure(FailureKind.MALFORMED_BODY, str(exc))

    if isinstance(exc, TypeError):
        return KnownFailure(FailureKind.TYPE_MISMATCH, str(exc))

    if isinstance(exc, OverflowError):
        return KnownFailure(FailureKind.OUT_OF_RANGE, str(exc))

    if isinstance(exc, httpx.TimeoutException):
        return KnownFailure(FailureKind.CONNECTION_TIMEOUT, str(exc))

    if isinstance(exc, httpx.ConnectError):
        return KnownFailure(FailureKind.CONNECTION_REFUSED, str(exc))

    if isinstance(exc, OSError):
        return _translate_os_error(exc)

    if isinstance(exc, httpx.HTTPStatusError):
        return KnownFailure(
            FailureKind.UPSTREAM_HTTP,
            _upstream_message(exc),
            upstream_status=exc.response.status_code,
        )

    return None


# -----------------------
# Async context manager for repositories
# -----------------------

@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None, values: Mapping[str, Any] | None = None):
    """
    Usage:
        async with db_error_handler(self.db, "Product", values={"name": name}):
            ... DB ops ...

    Rolls back and re-raises persistence failures as KnownFailure. `values` lets a
    duplicate-key failure name the conflicting value when the driver message does not.
    Application errors raised inside the block pass through untouched.
    """
    try:
        yield
    except (AppError, KnownFailure):
        raise
    except (SQLAlchemyError, OSError) as exc:
        try:
            await db.rollback()
        except Exception:
            # Rollback failing is unusual; keep the original failure, log this one with its stack.
            logger.exception("Failed to rollback session after persistence error", extra={"model": model_name})

        failure = translate_persistence_error(exc, values)
        logger.info(
            "adapter.persistence_failure",
            extra={"model": model_name or "database", "failure_kind": failure.kind.value},
        )
        raise failure from exc


__all__ = [
    "extract_conflict",
    "translate_exception",
    "translate_persistence_error",
    "db_error_handler",
]
