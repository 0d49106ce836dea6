"""
Base Service.

Shared plumbing for entry services: the session, a module logger, and
translation of SQLAlchemy failures into application errors.
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from entrybook.backend.core.exceptions import ConflictError, DatabaseError
from entrybook.backend.core.logging import get_logger

T = TypeVar("T")

UNIQUE_VIOLATION_MARKERS = ("unique", "duplicate")


class BaseService:
    """
    Base class for services working on one database session.

    Subclasses call super().__init__(session) and build their
    repositories from ``self.session``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a store call, converting SQLAlchemy errors.

        Failures are never retried; the caller owns the transaction.

        Raises:
            ConflictError: A unique constraint was violated, e.g. a public
                identifier taken between the existence check and the flush
            DatabaseError: Any other persistence failure
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e.orig)},
            )
            if any(marker in str(e).lower() for marker in UNIQUE_VIOLATION_MARKERS):
                raise ConflictError("Resource already exists") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _log_operation(self, operation: str, **context: Any) -> None:
        """Log a state-changing operation at info level."""
        self._logger.info(operation, extra={"service": self.__class__.__name__, **context})

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra={"service": self.__class__.__name__, **context})
