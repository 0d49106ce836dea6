"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from unittest.mock import AsyncMock

import pytest


# =============================================================================
# Record Store Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_entry_store() -> AsyncMock:
    """
    Mock entry repository.

    Defaults: no public identifier is taken and the owner has no entries.

    Usage:
        def test_generator(mock_entry_store):
            mock_entry_store.public_id_exists.side_effect = [True, False]
    """
    store = AsyncMock()
    store.public_id_exists = AsyncMock(return_value=False)
    store.count_by_owner = AsyncMock(return_value=0)
    store.find_one = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Mock database session for unit tests."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.delete = AsyncMock()
    return session
