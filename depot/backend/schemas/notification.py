"""
Notification Schemas.

Pydantic schemas for notification API request/response validation.
Wire names are camelCase (eventId, parentEventId, ...); Python code uses
the snake_case field names.
"""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
)
from pydantic.alias_generators import to_camel

from depot.backend.core.utils import to_naive_utc

_CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)


class NotificationCreate(BaseModel):
    """Schema for appending (or overwriting) a notification."""

    event_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Producer-assigned unique event identifier",
        examples=["3f0c8a52-refresh-1"],
    )
    parent_event_id: str | None = Field(
        default=None,
        max_length=255,
        description="Event id of the attempt that triggered this one",
    )
    group_id: str | None = Field(default=None, max_length=255, examples=["org.finos.legend"])
    artifact_id: str | None = Field(default=None, max_length=255, examples=["legend-sdlc"])
    version_id: str | None = Field(default=None, max_length=255, examples=["1.0.0"])
    status: str | None = Field(
        default=None,
        min_length=1,
        max_length=64,
        description="Outcome state, e.g. IN_PROGRESS, SUCCESS, FAILED",
        examples=["IN_PROGRESS"],
    )
    detail: Any = Field(
        default=None,
        description="Free-form payload such as an error message or step log",
    )

    model_config = _CAMEL_CONFIG


class NotificationCompletion(BaseModel):
    """Schema for completing a notification with a terminal status."""

    event_id: str = Field(..., min_length=1, max_length=255)
    status: str = Field(
        ...,
        min_length=1,
        max_length=64,
        examples=["SUCCESS"],
    )
    detail: Any = Field(default=None)

    model_config = _CAMEL_CONFIG


class NotificationFilter(BaseModel):
    """
    Optional search criteria, combined with AND.

    success=True matches SUCCESS, success=False matches FAILED.
    Time bounds apply to lastUpdated; to_date defaults to the time of
    the search.
    """

    group_id: str | None = None
    artifact_id: str | None = None
    version_id: str | None = None
    parent_event_id: str | None = None
    success: bool | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None

    model_config = _CAMEL_CONFIG

    @field_validator("from_date", "to_date")
    @classmethod
    def _normalize_timezone(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        return to_naive_utc(value)


class NotificationResponse(BaseModel):
    """Schema for a notification in API responses. Unset fields are omitted."""

    event_id: str
    parent_event_id: str | None = None
    group_id: str | None = None
    artifact_id: str | None = None
    version_id: str | None = None
    status: str | None = None
    created_at: datetime | None = None
    last_updated: datetime | None = None
    detail: Any = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @model_serializer(mode="wrap")
    def _omit_unset(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}
