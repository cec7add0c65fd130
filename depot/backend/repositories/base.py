"""
Base Repository.

Base class for all repositories with common keyed operations.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from depot.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common keyed operations.

    Subclasses set the model class and the name of its key column:

        class NotificationRepository(BaseRepository[Notification]):
            model = Notification
            key = "event_id"

    Lookups return None for absent keys and deletes of absent keys are
    no-ops. Reads use populate_existing so instances already in the
    session identity map are refreshed from the database.
    """

    model: type[ModelType]
    key: str = "id"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def key_column(self) -> Any:
        """The mapped key column of the model."""
        return getattr(self.model, self.key)

    async def get_by_key(self, key: str) -> ModelType | None:
        """Get a single record by key, returning None if not found."""
        result = await self.session.execute(
            select(self.model)
            .where(self.key_column == key)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> list[ModelType]:
        """Get every record in storage order."""
        result = await self.session.execute(
            select(self.model).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def delete_by_key(self, key: str) -> int:
        """
        Delete a record by key.

        Returns:
            Number of rows removed (0 when the key was absent)
        """
        result = await self.session.execute(
            delete(self.model).where(self.key_column == key)
        )
        return result.rowcount or 0
