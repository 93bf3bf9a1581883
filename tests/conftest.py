"""
Streambean Test Fixtures
========================

Fixtures are automatically discovered by pytest. The FastAPI client runs
the real routers and services against FakeTwitchClient.
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set testing environment variables before any imports
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TWITCH_CLIENT_ID", "test-client-id")
os.environ.setdefault("TWITCH_CLIENT_SECRET", "test-client-secret")

from streambean.config import CategoryConfig  # noqa: E402
from streambean.dependencies import get_twitch_client  # noqa: E402
from streambean.main import app  # noqa: E402
from tests.factories import TEST_CATEGORIES, FakeTwitchClient  # noqa: E402


@pytest.fixture
def fake_client() -> FakeTwitchClient:
    return FakeTwitchClient()


@pytest.fixture
def categories() -> dict[str, CategoryConfig]:
    return dict(TEST_CATEGORIES)


@pytest_asyncio.fixture
async def async_client(fake_client: FakeTwitchClient) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for the app with the Twitch client replaced by the fake.

    The lifespan is not run, so no real connection pool is created.
    """
    app.dependency_overrides[get_twitch_client] = lambda: fake_client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
