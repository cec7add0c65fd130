"""
Base Service.

Services own the transaction of one request or job: repositories only
stage statements, and the service commits once a write is complete.
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from depot.backend.core.exceptions import StoreUnavailableError
from depot.backend.core.logging import get_logger

T = TypeVar("T")


class BaseService:
    """
    Session holder with storage-error translation.

    Nothing is retried here. A storage failure reaches the caller as
    StoreUnavailableError and the caller decides whether to resend.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a store call, translating driver and connection errors.

        Raises:
            StoreUnavailableError: The store could not complete the operation
        """
        try:
            return await coro
        except (SQLAlchemyError, OSError) as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise StoreUnavailableError(f"Database operation failed: {operation}") from e

    async def _commit(self) -> None:
        """Commit staged writes; a failed commit is rolled back and raised."""
        try:
            await self._execute_db_operation("commit", self._session.commit())
        except StoreUnavailableError:
            await self._session.rollback()
            raise

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
