"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from depot.backend.api.v1.endpoints import admin, notifications

router = APIRouter()

# Notification ledger endpoints
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])

# Administrative export
router.include_router(admin.router, prefix="/admin", tags=["admin"])
