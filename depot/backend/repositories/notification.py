"""
Notification Repository.

Data access layer for the notification ledger. Every write is a single
INSERT ... ON CONFLICT statement keyed by event_id, so concurrent writes
to the same event resolve inside the database without a prior read.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite

from depot.backend.models.notification import Notification
from depot.backend.repositories.base import BaseRepository
from depot.backend.repositories.notification_query import build_notification_clauses
from depot.backend.schemas.notification import NotificationFilter

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_COLUMN_NAMES = tuple(column.name for column in Notification.__table__.columns)

_TIMESTAMP_COLUMNS = frozenset({"created_at", "last_updated"})

# Columns a replacing write never touches on an existing row
_IMMUTABLE_COLUMNS = frozenset({"event_id", "created_at"})

# Columns a completion touches on an existing row
_OUTCOME_COLUMNS = ("status", "detail", "last_updated")


class NotificationRepository(BaseRepository[Notification]):
    """Keyed upserts, filtered search and age-based purge for notifications."""

    model = Notification
    key = "event_id"

    def _insert(self) -> Any:
        dialect = self.session.get_bind().dialect.name
        try:
            return _INSERT_BY_DIALECT[dialect](Notification)
        except KeyError:
            raise ValueError(
                f"Notification upsert is not supported on dialect {dialect!r}"
            ) from None

    async def _upsert(self, values: dict[str, Any], update_columns: Iterable[str]) -> None:
        # Unset fields insert as NULL; unset timestamps fall back to column defaults
        row = {
            name: values.get(name)
            for name in _COLUMN_NAMES
            if name not in _TIMESTAMP_COLUMNS
        }
        row.update({
            name: values[name]
            for name in _TIMESTAMP_COLUMNS
            if values.get(name) is not None
        })
        stmt = self._insert().values(**row)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Notification.event_id],
            set_={name: stmt.excluded[name] for name in update_columns},
        )
        await self.session.execute(stmt)

    async def upsert(self, values: dict[str, Any]) -> None:
        """
        Insert a notification or replace the stored one with the same event_id.

        On conflict every column except event_id and created_at takes the
        new value, including None for fields the caller left unset.
        """
        await self._upsert(
            values,
            [name for name in _COLUMN_NAMES if name not in _IMMUTABLE_COLUMNS],
        )

    async def record_outcome(self, values: dict[str, Any]) -> None:
        """
        Set status, detail and last_updated of a notification.

        An existing row keeps its parent reference, coordinates and
        created_at, whatever was written to them concurrently. An absent
        event_id is inserted from values.
        """
        await self._upsert(values, _OUTCOME_COLUMNS)

    async def search(
        self,
        criteria: NotificationFilter,
        now: datetime,
    ) -> list[Notification]:
        """
        Find notifications matching all given criteria.

        Args:
            criteria: Optional filters, see build_notification_clauses
            now: Upper time bound when criteria.to_date is unset

        Returns:
            Matching notifications, most recently updated first
        """
        result = await self.session.execute(
            select(Notification)
            .where(*build_notification_clauses(criteria, now))
            .order_by(
                Notification.last_updated.desc(),
                Notification.event_id.desc(),
            )
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def delete_updated_before(self, cutoff: datetime) -> int:
        """Delete every notification last updated before cutoff; return the count."""
        result = await self.session.execute(
            delete(Notification).where(Notification.last_updated < cutoff)
        )
        return result.rowcount or 0
