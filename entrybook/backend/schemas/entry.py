"""
Entry Schemas.

Pydantic schemas for validating raw entry fields handed in by the
request layer and for the decrypted view handed back to it.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from entrybook.backend.models.entry import Category


def _coerce_category(value: Any) -> Any:
    """Accept category labels ("todo", "read_later") as well as ordinals."""
    if isinstance(value, str) and not value.isdigit():
        try:
            return Category[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown entry type: {value!r}") from None
    return value


class EntryCreate(BaseModel):
    """Schema for creating a new entry. Blank titles are synthesized."""

    title: str | None = Field(
        default=None,
        max_length=255,
        description="Entry title",
        examples=["Groceries"],
    )
    body: str | None = Field(
        default=None,
        description="Markdown body",
        examples=["- [ ] milk\n- [x] eggs"],
    )
    tags: str | None = Field(
        default=None,
        description="Comma-separated tags",
        examples=["todo, home"],
    )
    category: Category | None = Field(
        default=None,
        description="Explicit entry type; inferred from tags when omitted",
    )

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, value: Any) -> Any:
        return _coerce_category(value)


class EntryUpdate(BaseModel):
    """Schema for updating an entry. Only fields that are set are applied."""

    title: str | None = Field(default=None, max_length=255)
    body: str | None = None
    tags: str | None = None
    category: Category | None = None

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, value: Any) -> Any:
        return _coerce_category(value)


class ReadLaterCreate(BaseModel):
    """Schema for bookmarking a URL to read later."""

    url: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Source URL",
        examples=["https://example.com/article"],
    )
    tags: str = Field(default="", description="Comma-separated tags")
    notes: str = Field(default="", description="Markdown notes, stored as the body")


class EntryRead(BaseModel):
    """Decrypted view of an entry."""

    user_id: str
    entry_id: str
    category: str
    title: str
    body: str
    tags: str
    archived: bool
    url: str | None = None

    model_config = ConfigDict(from_attributes=True)
