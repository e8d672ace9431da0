"""
Inbound validation for product creation.

Rules are declared per field and all of them run: a value that is both missing
and too short yields two errors, in declaration order. String fields are
trimmed before their length is checked, and the trimmed values are what the
handler receives.
"""
import json
import re
from dataclasses import dataclass
from typing import Any, Callable

from fastapi import Request

from inventory.exceptions.failures import FailureKind, KnownFailure
from inventory.schemas.product import ProductCreate

from .config_validators import to_text

CATEGORY_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
# Same shape the store's integer check accepts: optional sign, no leading zeros
INTEGER_PATTERN = re.compile(r"^[-+]?(?:0|[1-9][0-9]*)$")


@dataclass(frozen=True)
class FieldRule:
    field: str
    check: Callable[[Any], bool]
    message: str


class RequestValidationFailed(Exception):
    """Raised by `validate_product_body` when at least one rule is violated."""

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__("Validation failed")
        self.errors = errors

    def to_payload(self) -> dict:
        return {
            "success": False,
            "message": "Validation failed",
            "errors": self.errors,
        }


# -----------------------
# Checks
# -----------------------

def _not_empty(value: Any) -> bool:
    return to_text(value) != ""


def _length_between(low: int, high: int) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return low <= len(to_text(value)) <= high
    return check


def is_non_negative_integer(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a quantity
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if isinstance(value, float):
        return value.is_integer() and value >= 0
    if isinstance(value, str) and INTEGER_PATTERN.fullmatch(value):
        return int(value) >= 0
    return False


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) >= 1


def _all_category_ids(value: Any) -> bool:
    if not isinstance(value, list):
        return False
    return all(isinstance(item, str) and CATEGORY_ID_PATTERN.fullmatch(item) for item in value)


PRODUCT_RULES: list[FieldRule] = [
    FieldRule("name", _not_empty, "Product name is required"),
    FieldRule("name", _length_between(3, 100), "Name must be 3-100 characters"),
    FieldRule("description", _not_empty, "Description is required"),
    FieldRule("description", _length_between(10, 500), "Description must be 10-500 characters"),
    FieldRule("quantity", _not_empty, "Quantity is required"),
    FieldRule("quantity", is_non_negative_integer, "Quantity must be a non-negative integer"),
    FieldRule("categories", _non_empty_list, "At least one category is required"),
    FieldRule("categories", _all_category_ids, "Invalid category ID format"),
]

# Fields trimmed before any rule sees them
_TRIMMED_FIELDS = ("name", "description")


# -----------------------
# Entry points
# -----------------------

def collect_violations(body: Any, rules: list[FieldRule] = PRODUCT_RULES) -> list[dict[str, str]]:
    """Run every rule against `body` and return `{field, message}` for each one that fails."""
    data = body if isinstance(body, dict) else {}
    values = dict(data)
    for field in _TRIMMED_FIELDS:
        values[field] = to_text(data.get(field)).strip()

    return [
        {"field": rule.field, "message": rule.message}
        for rule in rules
        if not rule.check(values.get(rule.field))
    ]


def validate_product_payload(body: Any) -> ProductCreate:
    """
    Validate a decoded JSON body and return the normalised payload.

    Raises:
        RequestValidationFailed: one entry per violated rule
    """
    errors = collect_violations(body)
    if errors:
        raise RequestValidationFailed(errors)

    return ProductCreate(
        name=to_text(body["name"]).strip(),
        description=to_text(body["description"]).strip(),
        quantity=int(body["quantity"]),
        categories=list(body["categories"]),
    )


async def validate_product_body(request: Request) -> ProductCreate:
    """
    FastAPI dependency for POST /api/products.

    Raises:
        KnownFailure(MALFORMED_BODY): the body is not valid JSON
        RequestValidationFailed: the body violates one or more rules
    """
    raw = await request.body()
    if not raw.strip():
        body: Any = {}
    else:
        try:
            body = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise KnownFailure(FailureKind.MALFORMED_BODY, str(exc)) from exc

    return validate_product_payload(body)
