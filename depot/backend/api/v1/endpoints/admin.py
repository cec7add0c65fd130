"""
Admin API Endpoints.

Unfiltered export of the notification ledger.
"""

from fastapi import APIRouter

from depot.backend.core.dependencies import DbSession, RequestId
from depot.backend.schemas.base import ApiResponse, ResponseMetadata
from depot.backend.schemas.notification import NotificationResponse
from depot.backend.services.notification import NotificationService

router = APIRouter()


@router.get(
    "/notifications",
    response_model=ApiResponse[list[NotificationResponse]],
    summary="Export all notifications",
    description="Every stored notification in storage order, without filtering.",
)
async def export_notifications(
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[NotificationResponse]]:
    service = NotificationService(db)
    notifications = await service.list_all()
    return ApiResponse(
        data=[NotificationResponse.model_validate(n) for n in notifications],
        metadata=ResponseMetadata(request_id=request_id),
    )
