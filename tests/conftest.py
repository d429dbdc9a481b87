"""Shared test fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.fm_common.database import get_db_session
from src.main import app


@pytest.fixture
def db() -> MagicMock:
    """Stand-in AsyncSession; tests set ``db.execute`` as needed."""
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
async def client(db: MagicMock) -> AsyncClient:
    """Async HTTP client for the FastAPI app with the DB session overridden."""

    async def _db_override():
        yield db

    app.dependency_overrides[get_db_session] = _db_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
