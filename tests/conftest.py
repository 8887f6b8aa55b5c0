"""Pytest configuration and fixtures."""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from goal_tracker.config import settings
from goal_tracker.main import app
from goal_tracker.storage.backend import MemoryBackend


@pytest.fixture
def backend():
    """Fresh in-memory backend."""
    return MemoryBackend()


@pytest_asyncio.fixture
async def app_client(backend, monkeypatch):
    """
    Create a test client backed by a clean in-memory store.

    This fixture:
    - Installs the in-memory backend as the process backend
    - Runs auth in demo mode (bearer token is read as the caller's email)
    - Yields an async HTTP client for testing
    - Restores the previous backend afterwards
    """
    monkeypatch.setattr(settings, "jwt_secret", None)

    from goal_tracker.database import database
    original_backend = database.backend
    database.backend = backend

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    database.backend = original_backend
