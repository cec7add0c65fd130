"""
Unit Tests for the Request Session Dependency.

The session factory is mocked; these tests check what get_db_session does
to the session around a request.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from depot.backend.core.database import get_db_session


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def session_factory(session) -> MagicMock:
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = session
    factory.return_value.__aexit__.return_value = False
    return factory


class TestGetDbSession:
    """Tests for get_db_session."""

    @pytest.mark.asyncio
    async def test_does_not_commit_after_request(self, session, session_factory):
        with patch("depot.backend.core.database.get_session_factory", return_value=session_factory):
            dependency = get_db_session()
            assert await dependency.__anext__() is session
            with pytest.raises(StopAsyncIteration):
                await dependency.__anext__()

        session.commit.assert_not_awaited()
        session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rolls_back_when_request_fails(self, session, session_factory):
        with patch("depot.backend.core.database.get_session_factory", return_value=session_factory):
            dependency = get_db_session()
            await dependency.__anext__()
            with pytest.raises(RuntimeError, match="handler failed"):
                await dependency.athrow(RuntimeError("handler failed"))

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()
