# Pydantic schemas package
from entrybook.backend.schemas.entry import (
    EntryCreate,
    EntryRead,
    EntryUpdate,
    ReadLaterCreate,
)

__all__ = [
    "EntryCreate",
    "EntryRead",
    "EntryUpdate",
    "ReadLaterCreate",
]
