"""
Entry Repository.

Data access layer for entries. Every lookup is scoped to an owner;
public identifiers are only unique within one owner's entries.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from entrybook.backend.models.entry import Category, Entry
from entrybook.backend.repositories.base import BaseRepository


class EntryRepository(BaseRepository[Entry]):
    """
    Repository for Entry model.

    Inherits standard CRUD operations from BaseRepository
    and adds owner-scoped queries.
    """

    model = Entry

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def find_one(self, user_id: str, entry_id: str) -> Entry | None:
        """
        Find an entry by owner and public identifier.

        Args:
            user_id: Owner reference
            entry_id: Public identifier

        Returns:
            The entry, or None if the owner has no such entry
        """
        result = await self.session.execute(
            select(Entry)
            .where(Entry.user_id == user_id)
            .where(Entry.entry_id == entry_id)
        )
        return result.scalar_one_or_none()

    async def public_id_exists(self, user_id: str, entry_id: str) -> bool:
        """Check whether the owner already has an entry with this public identifier."""
        result = await self.session.execute(
            select(Entry.id)
            .where(Entry.user_id == user_id)
            .where(Entry.entry_id == entry_id)
        )
        return result.scalar_one_or_none() is not None

    async def count_by_owner(self, user_id: str) -> int:
        """Get the number of entries owned by a user, archived included."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Entry)
            .where(Entry.user_id == user_id)
        )
        return result.scalar_one()

    async def search(
        self,
        user_id: str,
        category: Category,
        limit: int = 30,
        offset: int = 0,
        include_archived: bool = True,
    ) -> list[Entry]:
        """
        List an owner's entries of one category, oldest first.

        Args:
            user_id: Owner reference
            category: Category to filter by
            limit: Maximum number of entries to return
            offset: Number of entries to skip
            include_archived: Whether archived entries are included

        Returns:
            List of matching entries
        """
        query = (
            select(Entry)
            .where(Entry.user_id == user_id)
            .where(Entry.entry_type == int(category))
        )
        if not include_archived:
            query = query.where(Entry.archived == False)  # noqa: E712

        result = await self.session.execute(
            query.order_by(Entry.created_at.asc()).limit(limit).offset(offset)
        )
        return list(result.scalars().all())

    async def delete(self, instance: Entry) -> None:
        """Delete an entry and its read-later detail, if any."""
        await self.session.refresh(instance, attribute_names=["read_entry"])
        await super().delete(instance)
