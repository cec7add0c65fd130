"""
Notifications API Endpoints.

REST API endpoints for the notification ledger. Appends and completions
are upserts keyed by eventId; reads of absent events return null data
and deletes of absent events succeed.
"""

from datetime import datetime

from fastapi import APIRouter, Query

from depot.backend.core.dependencies import DbSession, RequestClock, RequestId
from depot.backend.schemas.base import ApiResponse, ResponseMetadata
from depot.backend.schemas.notification import (
    NotificationCompletion,
    NotificationCreate,
    NotificationFilter,
    NotificationResponse,
)
from depot.backend.services.notification import NotificationService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[NotificationResponse],
    summary="Append a notification",
    description="Record a new operation attempt, or overwrite the event with the same eventId.",
)
async def append_notification(
    data: NotificationCreate,
    db: DbSession,
    request_id: RequestId,
    clock: RequestClock,
) -> ApiResponse[NotificationResponse]:
    """Append or overwrite a notification."""
    service = NotificationService(db, clock=clock)
    notification = await service.append(data)
    return ApiResponse(
        data=NotificationResponse.model_validate(notification),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/complete",
    response_model=ApiResponse[NotificationResponse],
    summary="Complete a notification",
    description=(
        "Set the outcome status of an event. Parent and coordinate fields "
        "of the stored event are kept."
    ),
)
async def complete_notification(
    data: NotificationCompletion,
    db: DbSession,
    request_id: RequestId,
    clock: RequestClock,
) -> ApiResponse[NotificationResponse]:
    """Complete a notification."""
    service = NotificationService(db, clock=clock)
    notification = await service.complete(data)
    return ApiResponse(
        data=NotificationResponse.model_validate(notification),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[NotificationResponse]],
    summary="Search notifications",
    description=(
        "Filter notifications by coordinate, parent event, outcome and "
        "lastUpdated window. toDate defaults to now. Results are ordered "
        "by lastUpdated, most recent first."
    ),
)
async def search_notifications(
    db: DbSession,
    request_id: RequestId,
    clock: RequestClock,
    group_id: str | None = Query(default=None, alias="groupId"),
    artifact_id: str | None = Query(default=None, alias="artifactId"),
    version_id: str | None = Query(default=None, alias="versionId"),
    parent_event_id: str | None = Query(default=None, alias="parentEventId"),
    success: bool | None = Query(
        default=None,
        description="true matches SUCCESS, false matches FAILED",
    ),
    from_date: datetime | None = Query(default=None, alias="fromDate"),
    to_date: datetime | None = Query(default=None, alias="toDate"),
) -> ApiResponse[list[NotificationResponse]]:
    """Search notifications."""
    criteria = NotificationFilter(
        group_id=group_id,
        artifact_id=artifact_id,
        version_id=version_id,
        parent_event_id=parent_event_id,
        success=success,
        from_date=from_date,
        to_date=to_date,
    )
    service = NotificationService(db, clock=clock)
    notifications = await service.search(criteria)
    return ApiResponse(
        data=[NotificationResponse.model_validate(n) for n in notifications],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{event_id}",
    response_model=ApiResponse[NotificationResponse],
    summary="Get a notification",
    description="Get a single notification by eventId. Absent events return null data.",
)
async def get_notification(
    event_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NotificationResponse]:
    """Get a notification by event id."""
    service = NotificationService(db)
    notification = await service.get(event_id)
    data = NotificationResponse.model_validate(notification) if notification else None
    return ApiResponse(data=data, metadata=ResponseMetadata(request_id=request_id))


@router.delete(
    "/{event_id}",
    status_code=204,
    summary="Delete a notification",
    description="Remove a notification. Deleting an absent event succeeds.",
)
async def delete_notification(
    event_id: str,
    db: DbSession,
    request_id: RequestId,
) -> None:
    """Delete a notification."""
    service = NotificationService(db)
    await service.delete(event_id)
