"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and real encryption.
These fixtures build on the root conftest.py database fixtures.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from entrybook.backend.core.crypto import FieldCipher
from entrybook.backend.repositories.entry import EntryRepository
from entrybook.backend.services.entry import EntryService

# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def entry_repository(db_session: AsyncSession) -> EntryRepository:
    """Entry repository bound to the test session."""
    return EntryRepository(db_session)


@pytest.fixture
def entry_service(db_session: AsyncSession, cipher: FieldCipher) -> EntryService:
    """
    Entry service bound to the test session and test cipher.

    Usage:
        async def test_create(entry_service: EntryService):
            entry = await entry_service.create_entry("user-1", EntryCreate(tags="todo"))
    """
    return EntryService(db_session, cipher=cipher)
