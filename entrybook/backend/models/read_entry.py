"""
Read Entry Model.

Detail record for read-later entries: the bookmarked source URL.
Each Entry owns at most one ReadEntry, deleted along with it.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from entrybook.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from entrybook.backend.models.entry import Entry


class ReadEntry(UUIDMixin, TimestampMixin, Base):
    """Read-later detail attached to an Entry."""

    __tablename__ = "read_entries"

    entry_primary_id: Mapped[str] = mapped_column(
        ForeignKey("entries.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    url: Mapped[str] = mapped_column(
        String(2048),
        nullable=False,
    )

    entry: Mapped["Entry"] = relationship(back_populates="read_entry")

    def __repr__(self) -> str:
        return f"<ReadEntry(entry_primary_id={self.entry_primary_id!r}, url={self.url!r})>"
