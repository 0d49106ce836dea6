"""
Title Synthesis.

Entries saved without a title get a numbered one, e.g. "Todo # 3", where
the number is the owner's entry count plus one. The count is read without
locking, so two entries created concurrently by the same owner can end up
with the same number. Titles are not required to be unique.
"""

from typing import Protocol

from entrybook.backend.core.exceptions import ValidationError
from entrybook.backend.models.entry import Category

TITLE_TEMPLATES: dict[Category, str] = {
    Category.NOTE: "Note # ",
    Category.TODO: "Todo # ",
    Category.READ_LATER: "Read # ",
}


class EntryCounter(Protocol):
    async def count_by_owner(self, user_id: str) -> int: ...


def title_for(category: Category, existing_count: int) -> str:
    """
    Build the default title for the next entry of an owner.

    Raises:
        ValidationError: If the category has no title template
    """
    template = TITLE_TEMPLATES.get(category)
    if template is None:
        raise ValidationError(
            "Cannot synthesize a title for an uncategorized entry",
            details={"entry_type": category.label},
        )
    return f"{template}{existing_count + 1}"


class TitleSynthesizer:
    """Fills blank titles from the owner's current entry count."""

    def __init__(self, counter: EntryCounter) -> None:
        self._counter = counter

    async def synthesize(self, category: Category, user_id: str) -> str:
        count = await self._counter.count_by_owner(user_id)
        return title_for(category, count)
