"""
Public Identifier Generation.

Short random hex identifiers, unique within one owner's entries.
Candidates are checked against the record store and regenerated on
collision, up to a configured number of attempts.
"""

import secrets
from collections.abc import Callable
from typing import Protocol

from entrybook.backend.core.exceptions import ConflictError
from entrybook.backend.core.logging import get_logger

logger = get_logger(__name__)

PUBLIC_ID_BYTES = 5
DEFAULT_MAX_ATTEMPTS = 25


class PublicIdLookup(Protocol):
    async def public_id_exists(self, user_id: str, entry_id: str) -> bool: ...


def generate_public_id(length_bytes: int = PUBLIC_ID_BYTES) -> str:
    """Return a random lowercase hex string of 2 * length_bytes characters."""
    return secrets.token_hex(length_bytes)


class IdentifierGenerator:
    """
    Assigns collision-checked public identifiers.

    Args:
        store: Anything that can answer public_id_exists(user_id, entry_id)
        max_attempts: Candidates tried before giving up
        length_bytes: Random bytes per identifier
        token_factory: Candidate source, replaceable for tests
    """

    def __init__(
        self,
        store: PublicIdLookup,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        length_bytes: int = PUBLIC_ID_BYTES,
        token_factory: Callable[[int], str] = generate_public_id,
    ) -> None:
        self._store = store
        self._max_attempts = max_attempts
        self._length_bytes = length_bytes
        self._token_factory = token_factory

    async def generate(self, user_id: str) -> str:
        """
        Generate a public identifier not yet used by this owner.

        Raises:
            ConflictError: If every attempt collided
        """
        for attempt in range(1, self._max_attempts + 1):
            candidate = self._token_factory(self._length_bytes)
            if not await self._store.public_id_exists(user_id, candidate):
                return candidate
            logger.warning(
                "Public identifier collision",
                extra={"user_id": user_id, "attempt": attempt},
            )

        logger.error(
            "Public identifier attempts exhausted",
            extra={"user_id": user_id, "max_attempts": self._max_attempts},
        )
        raise ConflictError(
            f"No free public identifier after {self._max_attempts} attempts",
            code="RES_IDENTIFIER_EXHAUSTED",
        )
