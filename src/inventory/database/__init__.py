from .base import Base, DocumentMixin
from .identifiers import OBJECT_ID_PATTERN, ensure_object_id, is_object_id, new_object_id

__all__ = [
    "Base",
    "DocumentMixin",
    "OBJECT_ID_PATTERN",
    "ensure_object_id",
    "is_object_id",
    "new_object_id",
]
