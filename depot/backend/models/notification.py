"""
Notification Model.

One row per refresh-operation attempt, keyed by the producer-assigned
event id. Absent optional fields are stored as NULL.
"""

from enum import StrEnum
from typing import Any

from sqlalchemy import JSON, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from depot.backend.models.base import Base, TimestampMixin


class EventStatus(StrEnum):
    """
    Known notification states.

    The status column is a plain string, so producers may record states
    outside this set without a schema change.
    """

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    IN_PROGRESS = "IN_PROGRESS"


class Notification(TimestampMixin, Base):
    """
    Notification ledger entry.

    parent_event_id is a plain back-reference to the attempt that
    triggered this one. There is no foreign key: dangling and cyclic
    references are stored as given.
    """

    __tablename__ = "notifications"

    event_id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )
    parent_event_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    group_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    artifact_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    version_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    status: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )
    detail: Mapped[Any | None] = mapped_column(
        JSON(none_as_null=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_notifications_parent_event_id", "parent_event_id"),
        Index("ix_notifications_status", "status"),
        Index("ix_notifications_last_updated", "last_updated"),
        Index("ix_notifications_coordinates", "group_id", "artifact_id", "version_id"),
    )

    def __repr__(self) -> str:
        return f"<Notification(event_id={self.event_id!r}, status={self.status!r})>"

