# SQLAlchemy models package
from entrybook.backend.models.base import Base, TimestampMixin, UUIDMixin
from entrybook.backend.models.entry import ENCRYPTED_FIELDS, Category, Entry
from entrybook.backend.models.read_entry import ReadEntry

__all__ = [
    "Base",
    "Category",
    "ENCRYPTED_FIELDS",
    "Entry",
    "ReadEntry",
    "TimestampMixin",
    "UUIDMixin",
]
