"""
Document identifiers.

Products and categories are addressed by 24-character hexadecimal ids, laid
out like a MongoDB ObjectId:

    | 4 bytes           | 5 bytes                 | 3 bytes                      |
    | unix seconds (BE) | per-process random value | counter, random start (BE)  |

The leading timestamp keeps ids roughly creation-ordered, which the product
listing uses as a tie-breaker when two rows share a `created_at`.
"""

import itertools
import os
import re
import threading
import time

from inventory.exceptions.failures import FailureKind, KnownFailure

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

_PROCESS_UNIQUE = os.urandom(5)
_COUNTER = itertools.count(int.from_bytes(os.urandom(3), "big"))
_COUNTER_LOCK = threading.Lock()


def new_object_id() -> str:
    """Return a fresh 24-hex-character identifier."""
    with _COUNTER_LOCK:
        counter = next(_COUNTER) & 0xFFFFFF
    raw = (
        int(time.time()).to_bytes(4, "big")
        + _PROCESS_UNIQUE
        + counter.to_bytes(3, "big")
    )
    return raw.hex()


def is_object_id(value) -> bool:
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None


def ensure_object_id(value, field: str) -> str:
    """
    Return `value` lower-cased if it is a well-formed identifier.

    Raises:
        KnownFailure(INVALID_IDENTIFIER): names the field and the offending value,
        the same way the store reports a failed cast.
    """
    if not is_object_id(value):
        raise KnownFailure(
            FailureKind.INVALID_IDENTIFIER,
            f"Cast to ObjectId failed for value {value!r} at path {field!r}",
            field=field,
            value=value,
            expected="ObjectId",
        )
    return value.lower()
