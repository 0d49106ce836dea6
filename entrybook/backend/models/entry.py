"""
Entry Model.

Database model for entries: notes, todos and read-later bookmarks.

The title, body and tags columns only ever hold ciphertext. Plaintext
supplied by a caller is staged on the instance and marks the field as
changed; the save pipeline encrypts staged fields and clears them.
"""

from enum import IntEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, reconstructor, relationship

from entrybook.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from entrybook.backend.models.read_entry import ReadEntry

ENCRYPTED_FIELDS = ("title", "body", "tags")


class Category(IntEnum):
    """Entry kinds, in classification order. Values are the stored ordinals."""

    UNCATEGORIZED = 0
    NOTE = 1
    TODO = 2
    READ_LATER = 3

    @property
    def label(self) -> str:
        return self.name.lower()


class Entry(UUIDMixin, TimestampMixin, Base):
    """
    Entry database model.

    Aggregate root for a single note, todo or bookmark owned by a user.
    `entry_id` is the short public identifier, unique per owner.
    """

    __tablename__ = "entries"
    __table_args__ = (
        UniqueConstraint("user_id", "entry_id", name="uq_entries_user_entry_id"),
    )

    entry_id: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    entry_type: Mapped[int] = mapped_column(
        Integer,
        default=int(Category.UNCATEGORIZED),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    body: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    tags: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    archived: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )

    read_entry: Mapped["ReadEntry | None"] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("entry_type", int(Category.UNCATEGORIZED))
        kwargs.setdefault("archived", False)
        kwargs.setdefault("read_entry", None)
        super().__init__(**kwargs)
        self._reset_transient_state()

    @reconstructor
    def _reset_transient_state(self) -> None:
        self._staged: dict[str, str] = {}
        self._category_assigned = False

    def __repr__(self) -> str:
        return f"<Entry(entry_id={self.entry_id!r}, user_id={self.user_id!r}, category={self.category.label})>"

    @property
    def public_id(self) -> str:
        return self.entry_id

    @property
    def category(self) -> Category:
        return Category(self.entry_type)

    @category.setter
    def category(self, value: Category) -> None:
        self.entry_type = int(value)

    def assign_category(self, value: Category) -> None:
        """Set the category explicitly, exempting this save from reclassification."""
        self.category = value
        self._category_assigned = True

    @property
    def category_assigned(self) -> bool:
        return self._category_assigned

    @property
    def is_note(self) -> bool:
        return self.category is Category.NOTE

    @property
    def is_todo(self) -> bool:
        return self.category is Category.TODO

    @property
    def is_read_later(self) -> bool:
        return self.category is Category.READ_LATER

    # -------------------------------------------------------------------------
    # Staged plaintext
    # -------------------------------------------------------------------------

    def stage(self, field: str, plaintext: str | None) -> None:
        """
        Stage new plaintext for an encrypted field and mark it changed.

        Raises:
            ValueError: If field is not one of title, body, tags
        """
        if field not in ENCRYPTED_FIELDS:
            raise ValueError(f"{field!r} is not an encrypted field")
        self._staged[field] = plaintext or ""

    def staged(self, field: str) -> str | None:
        """Return the staged plaintext for a field, or None if unchanged."""
        return self._staged.get(field)

    @property
    def changed_fields(self) -> frozenset[str]:
        return frozenset(self._staged)

    def clear_staged(self) -> None:
        self._staged.clear()
        self._category_assigned = False
