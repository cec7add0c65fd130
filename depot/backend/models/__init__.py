# SQLAlchemy models package
from depot.backend.models.base import Base
from depot.backend.models.notification import EventStatus, Notification

__all__ = [
    "Base",
    "EventStatus",
    "Notification",
]
