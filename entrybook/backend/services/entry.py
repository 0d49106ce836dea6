"""
Entry Service.

Business logic layer for entries. Stages raw field values, runs the save
pipeline, persists through the repository and exposes the read helpers
used by the request layer.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from entrybook.backend.core.config import get_app_config
from entrybook.backend.core.crypto import FieldCipher, get_field_cipher
from entrybook.backend.core.exceptions import NotFoundError
from entrybook.backend.models.entry import ENCRYPTED_FIELDS, Category, Entry
from entrybook.backend.models.read_entry import ReadEntry
from entrybook.backend.rendering.checklist import ChecklistMode, ChecklistRenderer
from entrybook.backend.repositories.entry import EntryRepository
from entrybook.backend.schemas.entry import EntryCreate, EntryRead, EntryUpdate, ReadLaterCreate
from entrybook.backend.services.base import BaseService
from entrybook.backend.services.classifier import build_match_tokens
from entrybook.backend.services.identifiers import IdentifierGenerator
from entrybook.backend.services.pipeline import EntrySavePipeline
from entrybook.backend.services.reader import EntryReader
from entrybook.backend.services.titles import TitleSynthesizer


class EntryService(BaseService):
    """
    Service for entry business logic.

    Args:
        session: Database session
        cipher: Field cipher, defaults to the process-wide instance
    """

    def __init__(self, session: AsyncSession, cipher: FieldCipher | None = None) -> None:
        super().__init__(session)
        self.repo = EntryRepository(session)

        entries_config = get_app_config().entries
        self.cipher = cipher or get_field_cipher()
        self.default_limit = entries_config.pagination.default_limit
        self.max_limit = entries_config.pagination.max_limit
        self.pipeline = EntrySavePipeline(
            identifiers=IdentifierGenerator(
                self.repo,
                max_attempts=entries_config.identifiers.max_attempts,
                length_bytes=entries_config.identifiers.length_bytes,
            ),
            titles=TitleSynthesizer(self.repo),
            cipher=self.cipher,
            match_tokens=build_match_tokens(entries_config.classification.tokens),
        )
        self.reader = EntryReader(
            self.cipher,
            ChecklistRenderer(
                extensions=entries_config.rendering.extensions,
                strict=entries_config.rendering.strict_checklist,
            ),
        )

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    async def find_entry(self, user_id: str, entry_id: str) -> Entry | None:
        """Find an owner's entry by public identifier, or None."""
        return await self.repo.find_one(user_id, entry_id)

    async def get_entry(self, user_id: str, entry_id: str) -> Entry:
        """
        Get an owner's entry by public identifier.

        Raises:
            NotFoundError: If the owner has no such entry
        """
        entry = await self.repo.find_one(user_id, entry_id)
        if entry is None:
            raise NotFoundError("Entry not found")
        return entry

    async def search_entries(
        self,
        user_id: str,
        category: Category,
        limit: int | None = None,
        offset: int = 0,
        include_archived: bool = True,
    ) -> list[Entry]:
        """
        List an owner's entries of one category.

        Args:
            user_id: Owner reference
            category: Category to list
            limit: Maximum entries, defaults to the configured page size
            offset: Entries to skip

        Returns:
            List of entries, oldest first
        """
        limit = min(limit or self.default_limit, self.max_limit)
        self._log_debug("Searching entries", user_id=user_id, category=category.label)
        return await self.repo.search(
            user_id,
            category,
            limit=limit,
            offset=max(offset, 0),
            include_archived=include_archived,
        )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_entry(self, user_id: str, data: EntryCreate) -> Entry:
        """
        Create a new entry.

        Raises:
            ValidationError: If the entry cannot be categorized or titled
            ConflictError: If no free public identifier was found
        """
        entry = Entry(user_id=user_id)
        self._apply(entry, data.model_dump(exclude_unset=True))
        await self.pipeline.run(entry)

        self._log_operation("Creating entry", user_id=user_id, entry_id=entry.entry_id)
        return await self._execute_db_operation("create_entry", self.repo.add(entry))

    async def update_entry(self, user_id: str, entry_id: str, data: EntryUpdate) -> Entry:
        """
        Update an existing entry. Only fields set on ``data`` change.

        Raises:
            NotFoundError: If the owner has no such entry
            ValidationError: If the pipeline rejects the entry
        """
        entry = await self.get_entry(user_id, entry_id)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return entry

        self._apply(entry, update_data)
        await self.pipeline.run(entry)

        self._log_operation(
            "Updating entry",
            entry_id=entry_id,
            fields=sorted(update_data),
        )
        return await self._execute_db_operation("update_entry", self.repo.save(entry))

    async def reencrypt_entry(self, user_id: str, entry_id: str) -> Entry:
        """Re-encrypt title, body and tags of an entry with the current key."""
        entry = await self.get_entry(user_id, entry_id)
        await self.pipeline.run(entry, reencrypt_all=True)

        self._log_operation("Re-encrypting entry", entry_id=entry_id)
        return await self._execute_db_operation("reencrypt_entry", self.repo.save(entry))

    async def add_read_later(self, user_id: str, data: ReadLaterCreate) -> Entry:
        """Bookmark a URL as a read-later entry with optional tags and notes."""
        entry = Entry(user_id=user_id)
        entry.assign_category(Category.READ_LATER)
        entry.stage("tags", data.tags)
        entry.stage("body", data.notes)
        entry.read_entry = ReadEntry(url=data.url)
        await self.pipeline.run(entry)

        self._log_operation("Adding read-later entry", user_id=user_id, entry_id=entry.entry_id)
        return await self._execute_db_operation("add_read_later", self.repo.add(entry))

    async def archive_entry(self, user_id: str, entry_id: str) -> Entry:
        """Archive an entry. Does not run the save pipeline."""
        entry = await self.get_entry(user_id, entry_id)
        self._log_operation("Archiving entry", entry_id=entry_id)
        return await self._execute_db_operation(
            "archive_entry",
            self.repo.update(entry, archived=True),
        )

    async def unarchive_entry(self, user_id: str, entry_id: str) -> Entry:
        """Unarchive an entry. Does not run the save pipeline."""
        entry = await self.get_entry(user_id, entry_id)
        self._log_operation("Unarchiving entry", entry_id=entry_id)
        return await self._execute_db_operation(
            "unarchive_entry",
            self.repo.update(entry, archived=False),
        )

    async def destroy_entry(self, user_id: str, entry_id: str) -> None:
        """Delete an entry together with its read-later detail."""
        entry = await self.get_entry(user_id, entry_id)
        self._log_operation("Deleting entry", entry_id=entry_id)
        await self._execute_db_operation("destroy_entry", self.repo.delete(entry))

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def decrypted_title(self, entry: Entry) -> str:
        return self.reader.decrypted_title(entry)

    def decrypted_body(self, entry: Entry) -> str:
        return self.reader.decrypted_body(entry)

    def decrypted_tags(self, entry: Entry) -> str:
        return self.reader.decrypted_tags(entry)

    def rendered_body(self, entry: Entry, mode: ChecklistMode = ChecklistMode.AUTO) -> str:
        return self.reader.rendered_body(entry, mode)

    def collect_entry_data(self, entry: Entry) -> EntryRead:
        """Build the decrypted view of an entry."""
        return EntryRead(
            user_id=entry.user_id,
            entry_id=entry.public_id,
            category=entry.category.label,
            title=self.reader.decrypted_title(entry),
            body=self.reader.decrypted_body(entry),
            tags=self.reader.decrypted_tags(entry),
            archived=entry.archived,
            url=entry.read_entry.url if entry.read_entry else None,
        )

    @staticmethod
    def _apply(entry: Entry, fields: dict) -> None:
        category = fields.pop("category", None)
        if category is not None:
            entry.assign_category(Category(category))
        for field in ENCRYPTED_FIELDS:
            if field in fields:
                entry.stage(field, fields[field])
