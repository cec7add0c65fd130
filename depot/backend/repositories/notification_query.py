"""
Notification Query Composition.

Turns optional search criteria into the list of SQL clauses the
repository ANDs together. The upper time bound is always present:
to_date when given, otherwise the caller-supplied "now".
"""

from datetime import datetime

from sqlalchemy import ColumnElement

from depot.backend.models.notification import EventStatus, Notification
from depot.backend.schemas.notification import NotificationFilter

_EQUALITY_CRITERIA = (
    ("group_id", Notification.group_id),
    ("artifact_id", Notification.artifact_id),
    ("version_id", Notification.version_id),
    ("parent_event_id", Notification.parent_event_id),
)


def success_status(success: bool) -> str:
    """Map the boolean success criterion onto a status value."""
    return EventStatus.SUCCESS.value if success else EventStatus.FAILED.value


def build_notification_clauses(
    criteria: NotificationFilter,
    now: datetime,
) -> list[ColumnElement[bool]]:
    """
    Build the conjunctive filter for a notification search.

    Args:
        criteria: Search criteria; None fields contribute no clause
        now: Upper time bound used when criteria.to_date is unset

    Returns:
        Clauses to be combined with AND, time bounds first
    """
    upper = criteria.to_date if criteria.to_date is not None else now
    clauses: list[ColumnElement[bool]] = [Notification.last_updated <= upper]

    if criteria.from_date is not None:
        clauses.append(Notification.last_updated >= criteria.from_date)

    for field_name, column in _EQUALITY_CRITERIA:
        value = getattr(criteria, field_name)
        if value is not None:
            clauses.append(column == value)

    if criteria.success is not None:
        clauses.append(Notification.status == success_status(criteria.success))

    return clauses
