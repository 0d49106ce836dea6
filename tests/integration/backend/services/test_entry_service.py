"""
Integration Tests for the Entry Service.

Runs the full save pipeline against a real database and real encryption.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from entrybook.backend.core.exceptions import DecryptionError, NotFoundError
from entrybook.backend.models import Category, Entry, ReadEntry
from entrybook.backend.rendering.checklist import ChecklistMode
from entrybook.backend.schemas.entry import EntryCreate, EntryUpdate, ReadLaterCreate
from entrybook.backend.services.entry import EntryService

OWNER = "user-1"
OTHER_OWNER = "user-2"


class TestCreateEntry:
    @pytest.mark.asyncio
    async def test_blank_todo_gets_synthesized_title(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(tags="todo"))

        assert entry.category is Category.TODO
        assert entry_service.decrypted_title(entry) == "Todo # 1"
        assert len(entry.entry_id) == 10
        assert entry.id is not None

    @pytest.mark.asyncio
    async def test_title_number_follows_entry_count(self, entry_service: EntryService):
        for _ in range(4):
            await entry_service.create_entry(OWNER, EntryCreate(title="x"))
        await entry_service.create_entry(OTHER_OWNER, EntryCreate(title="x"))

        entry = await entry_service.create_entry(OWNER, EntryCreate(tags="later"))

        assert entry_service.decrypted_title(entry) == "Read # 5"

    @pytest.mark.asyncio
    async def test_public_ids_are_distinct(self, entry_service: EntryService):
        entries = [
            await entry_service.create_entry(OWNER, EntryCreate(title=f"Entry {n}"))
            for n in range(10)
        ]
        assert len({entry.entry_id for entry in entries}) == 10

    @pytest.mark.asyncio
    async def test_stores_ciphertext_only(self, entry_service: EntryService, db_session: AsyncSession):
        entry = await entry_service.create_entry(
            OWNER,
            EntryCreate(title="Secret plans", body="hidden body", tags=" work ,, home "),
        )

        row = (await db_session.execute(select(Entry.title, Entry.body, Entry.tags))).one()
        assert "Secret" not in row.title
        assert "hidden" not in row.body
        assert entry_service.decrypted_tags(entry) == "work, home"
        assert entry_service.decrypted_body(entry) == "hidden body"

    @pytest.mark.asyncio
    async def test_explicit_category_wins_over_tags(self, entry_service: EntryService):
        entry = await entry_service.create_entry(
            OWNER,
            EntryCreate(title="x", tags="todo", category="note"),
        )
        assert entry.category is Category.NOTE


class TestUpdateEntry:
    @pytest.mark.asyncio
    async def test_changed_tags_reclassify(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(title="x", tags="todo"))

        updated = await entry_service.update_entry(OWNER, entry.entry_id, EntryUpdate(tags="then, later"))

        assert updated.category is Category.TODO
        updated = await entry_service.update_entry(OWNER, entry.entry_id, EntryUpdate(tags="later"))
        assert updated.category is Category.READ_LATER

    @pytest.mark.asyncio
    async def test_only_changed_fields_reencrypted(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(title="t", body="b", tags="x"))
        title, tags = entry.title, entry.tags

        updated = await entry_service.update_entry(OWNER, entry.entry_id, EntryUpdate(body="new"))

        assert updated.title == title
        assert updated.tags == tags
        assert entry_service.decrypted_body(updated) == "new"

    @pytest.mark.asyncio
    async def test_empty_update_is_a_no_op(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(title="t"))
        title = entry.title

        updated = await entry_service.update_entry(OWNER, entry.entry_id, EntryUpdate())

        assert updated.title == title

    @pytest.mark.asyncio
    async def test_clearing_title_synthesizes_one(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(title="t"))

        updated = await entry_service.update_entry(OWNER, entry.entry_id, EntryUpdate(title="  "))

        assert entry_service.decrypted_title(updated) == "Note # 2"

    @pytest.mark.asyncio
    async def test_unknown_entry(self, entry_service: EntryService):
        with pytest.raises(NotFoundError):
            await entry_service.update_entry(OWNER, "missing000", EntryUpdate(title="t"))

    @pytest.mark.asyncio
    async def test_other_owner_cannot_update(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(title="t"))

        with pytest.raises(NotFoundError):
            await entry_service.update_entry(OTHER_OWNER, entry.entry_id, EntryUpdate(title="x"))


class TestReencryptEntry:
    @pytest.mark.asyncio
    async def test_all_fields_get_fresh_ciphertext(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(title="t", body="b", tags="x"))
        before = (entry.title, entry.body, entry.tags)

        entry = await entry_service.reencrypt_entry(OWNER, entry.entry_id)

        assert (entry.title, entry.body, entry.tags) != before
        data = entry_service.collect_entry_data(entry)
        assert (data.title, data.body, data.tags) == ("t", "b", "x")


class TestArchive:
    @pytest.mark.asyncio
    async def test_archive_and_unarchive(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(title="t"))
        title = entry.title

        archived = await entry_service.archive_entry(OWNER, entry.entry_id)
        assert archived.archived is True
        assert archived.title == title
        assert entry_service.reader.display_title(archived) == "(t)"

        active = await entry_service.unarchive_entry(OWNER, entry.entry_id)
        assert active.archived is False


class TestReadLater:
    @pytest.mark.asyncio
    async def test_add_read_later(self, entry_service: EntryService):
        entry = await entry_service.add_read_later(
            OWNER,
            ReadLaterCreate(url="https://example.com/a", tags="todo", notes="skim"),
        )

        data = entry_service.collect_entry_data(entry)
        assert data.category == "read_later"
        assert data.url == "https://example.com/a"
        assert data.title == "Read # 1"
        assert data.body == "skim"
        assert data.tags == "todo"

    @pytest.mark.asyncio
    async def test_destroy_removes_read_entry(self, entry_service: EntryService, db_session: AsyncSession):
        entry = await entry_service.add_read_later(OWNER, ReadLaterCreate(url="https://example.com/a"))

        await entry_service.destroy_entry(OWNER, entry.entry_id)

        assert await entry_service.find_entry(OWNER, entry.entry_id) is None
        assert (await db_session.execute(select(ReadEntry))).scalars().all() == []


class TestLookup:
    @pytest.mark.asyncio
    async def test_get_entry_not_found(self, entry_service: EntryService):
        with pytest.raises(NotFoundError):
            await entry_service.get_entry(OWNER, "missing000")

    @pytest.mark.asyncio
    async def test_search_entries(self, entry_service: EntryService):
        todo = await entry_service.create_entry(OWNER, EntryCreate(tags="todo"))
        await entry_service.create_entry(OWNER, EntryCreate(tags="note"))
        await entry_service.create_entry(OTHER_OWNER, EntryCreate(tags="todo"))

        found = await entry_service.search_entries(OWNER, Category.TODO)

        assert [entry.entry_id for entry in found] == [todo.entry_id]

    @pytest.mark.asyncio
    async def test_search_limit_capped(self, entry_service: EntryService):
        await entry_service.create_entry(OWNER, EntryCreate(title="t"))
        found = await entry_service.search_entries(OWNER, Category.NOTE, limit=10_000)
        assert len(found) == 1


class TestReads:
    @pytest.mark.asyncio
    async def test_rendered_todo_body(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(body="- [x] a\n- [ ] b", tags="todo"))

        html = entry_service.rendered_body(entry)

        assert html.startswith("<ul class='todo'>")
        assert html.count('type="checkbox"') == 2
        assert 'type="checkbox"' not in entry_service.rendered_body(entry, ChecklistMode.NONE)

    @pytest.mark.asyncio
    async def test_collect_entry_data(self, entry_service: EntryService):
        entry = await entry_service.create_entry(OWNER, EntryCreate(title="t", body="b"))

        data = entry_service.collect_entry_data(entry)

        assert data.model_dump() == {
            "user_id": OWNER,
            "entry_id": entry.entry_id,
            "category": "note",
            "title": "t",
            "body": "b",
            "tags": "",
            "archived": False,
            "url": None,
        }

    @pytest.mark.asyncio
    async def test_wrong_key_cannot_read(self, entry_service: EntryService, db_session, other_cipher):
        entry = await entry_service.create_entry(OWNER, EntryCreate(title="t"))

        with pytest.raises(DecryptionError):
            EntryService(db_session, cipher=other_cipher).decrypted_title(entry)
