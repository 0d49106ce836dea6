"""
Unit Tests for Public Identifier Generation.

The record store is mocked; collisions are forced through it.
"""

import re
from unittest.mock import AsyncMock

import pytest

from entrybook.backend.core.exceptions import ConflictError
from entrybook.backend.services.identifiers import IdentifierGenerator, generate_public_id

HEX_ID = re.compile(r"^[0-9a-f]{10}$")


class TestGeneratePublicId:
    """Tests for raw identifier generation."""

    def test_is_ten_lowercase_hex_characters(self):
        assert HEX_ID.match(generate_public_id())

    def test_length_follows_byte_count(self):
        assert len(generate_public_id(8)) == 16

    def test_values_vary(self):
        assert len({generate_public_id() for _ in range(50)}) == 50


class TestIdentifierGenerator:
    """Tests for collision-checked generation."""

    @pytest.mark.asyncio
    async def test_returns_first_free_candidate(self, mock_entry_store):
        generator = IdentifierGenerator(mock_entry_store)

        result = await generator.generate("user-1")

        assert HEX_ID.match(result)
        mock_entry_store.public_id_exists.assert_awaited_once_with("user-1", result)

    @pytest.mark.asyncio
    async def test_retries_after_collision(self, mock_entry_store):
        candidates = iter(["aaaaaaaaaa", "aaaaaaaaaa", "bbbbbbbbbb"])
        taken = {"aaaaaaaaaa"}
        mock_entry_store.public_id_exists = AsyncMock(
            side_effect=lambda user_id, entry_id: entry_id in taken
        )
        generator = IdentifierGenerator(
            mock_entry_store, token_factory=lambda n: next(candidates)
        )

        result = await generator.generate("user-1")

        assert result == "bbbbbbbbbb"
        assert mock_entry_store.public_id_exists.await_count == 3

    @pytest.mark.asyncio
    async def test_checks_are_scoped_to_owner(self, mock_entry_store):
        generator = IdentifierGenerator(mock_entry_store, token_factory=lambda n: "cccccccccc")

        await generator.generate("user-42")

        mock_entry_store.public_id_exists.assert_awaited_once_with("user-42", "cccccccccc")

    @pytest.mark.asyncio
    async def test_exhausted_attempts_raise_conflict(self, mock_entry_store):
        mock_entry_store.public_id_exists = AsyncMock(return_value=True)
        generator = IdentifierGenerator(mock_entry_store, max_attempts=3)

        with pytest.raises(ConflictError) as exc_info:
            await generator.generate("user-1")

        assert exc_info.value.code == "RES_IDENTIFIER_EXHAUSTED"
        assert mock_entry_store.public_id_exists.await_count == 3

    @pytest.mark.asyncio
    async def test_many_generations_are_distinct(self, mock_entry_store):
        issued: set[str] = set()
        mock_entry_store.public_id_exists = AsyncMock(
            side_effect=lambda user_id, entry_id: entry_id in issued
        )
        generator = IdentifierGenerator(mock_entry_store)

        for _ in range(100):
            issued.add(await generator.generate("user-1"))

        assert len(issued) == 100
