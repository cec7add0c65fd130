"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from depot.backend.core.database import get_db_session
from depot.backend.core.utils import Clock, utc_now

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


def get_clock() -> Clock:
    """
    Provide the clock used to stamp writes and bound searches.

    Override with app.dependency_overrides[get_clock] to inject time in tests.
    """
    return utc_now


RequestClock = Annotated[Clock, Depends(get_clock)]
