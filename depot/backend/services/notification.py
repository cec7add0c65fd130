"""
Notification Service.

Producer and consumer façade over the notification ledger. Producers
append an event when a refresh operation starts and complete it with a
terminal status; monitoring and purge jobs search, export and delete.
The service keeps no state between calls beyond its session.
"""

from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from depot.backend.core.utils import Clock, utc_now
from depot.backend.models.notification import Notification
from depot.backend.repositories.notification import NotificationRepository
from depot.backend.schemas.notification import (
    NotificationCompletion,
    NotificationCreate,
    NotificationFilter,
)
from depot.backend.services.base import BaseService


class NotificationService(BaseService):
    """
    Service for notification ledger operations.

    Writes are keyed upserts stamped from the injected clock and are
    committed before the method returns. On StoreUnavailableError the
    caller may resend the same event id.
    """

    def __init__(self, session: AsyncSession, clock: Clock = utc_now) -> None:
        super().__init__(session)
        self.repo = NotificationRepository(session)
        self._clock = clock

    def _validate_new_event(self, data: NotificationCreate) -> None:
        """
        Per-field validation hook for appended events.

        Intentionally accepts everything. Checks added here should raise
        ValidationError.
        """

    async def append(self, data: NotificationCreate) -> Notification:
        """
        Append a notification, or overwrite the one with the same event id.

        Args:
            data: Event fields; unset optional fields are stored as absent

        Returns:
            The stored notification
        """
        self._validate_new_event(data)
        now = self._clock()

        self._log_operation(
            "Appending notification",
            event_id=data.event_id,
            parent_event_id=data.parent_event_id,
            status=data.status,
        )

        values = data.model_dump()
        values.update(created_at=now, last_updated=now)

        await self._execute_db_operation("append_notification", self.repo.upsert(values))
        await self._commit()
        return await self._execute_db_operation(
            "get_notification", self.repo.get_by_key(data.event_id),
        )

    async def complete(self, data: NotificationCompletion) -> Notification:
        """
        Record the outcome of a notification.

        Status and detail are replaced and last_updated is refreshed in one
        statement. The parent reference, coordinates and creation time of
        the stored event are never written, so a concurrent append keeps
        them. Completing an unknown event id creates it.

        Args:
            data: Event id, outcome status and optional detail

        Returns:
            The stored notification
        """
        now = self._clock()
        values = {
            "event_id": data.event_id,
            "status": data.status,
            "detail": data.detail,
            "created_at": now,
            "last_updated": now,
        }

        self._log_operation("Completing notification", event_id=data.event_id, status=data.status)

        await self._execute_db_operation("complete_notification", self.repo.record_outcome(values))
        await self._commit()
        return await self._execute_db_operation(
            "get_notification", self.repo.get_by_key(data.event_id),
        )

    async def get(self, event_id: str) -> Notification | None:
        """Get a notification by event id, or None when absent."""
        return await self._execute_db_operation(
            "get_notification", self.repo.get_by_key(event_id),
        )

    async def search(
        self,
        criteria: NotificationFilter,
        now: datetime | None = None,
    ) -> list[Notification]:
        """
        Search notifications, most recently updated first.

        Args:
            criteria: Optional filters combined with AND
            now: Upper time bound when criteria.to_date is unset;
                defaults to the service clock

        Returns:
            Matching notifications ordered by last_updated descending
        """
        upper = now if now is not None else self._clock()
        self._log_debug(
            "Searching notifications",
            criteria=criteria.model_dump(exclude_none=True, mode="json"),
        )
        return await self._execute_db_operation(
            "search_notifications", self.repo.search(criteria, upper),
        )

    async def list_all(self) -> list[Notification]:
        """Return every stored notification, unfiltered."""
        return await self._execute_db_operation(
            "list_notifications", self.repo.get_all(),
        )

    async def delete(self, event_id: str) -> None:
        """Delete a notification. Deleting an absent event id is a no-op."""
        deleted = await self._execute_db_operation(
            "delete_notification", self.repo.delete_by_key(event_id),
        )
        await self._commit()
        self._log_operation("Deleted notification", event_id=event_id, deleted=deleted)

    async def purge(self, older_than: timedelta) -> int:
        """
        Delete notifications whose last update is older than the given age.

        Children are removed on their own age only; a purged parent leaves
        its children's parent_event_id dangling.

        Returns:
            Number of notifications removed
        """
        cutoff = self._clock() - older_than
        deleted = await self._execute_db_operation(
            "purge_notifications", self.repo.delete_updated_before(cutoff),
        )
        await self._commit()
        self._log_operation("Purged notifications", cutoff=cutoff.isoformat(), deleted=deleted)
        return deleted
