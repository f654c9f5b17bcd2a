"""Fixtures for API unit tests: in-memory Redis, fixed clock, AsyncClient."""

import pytest
from httpx import ASGITransport, AsyncClient

from prr_engine.main import app


@pytest.fixture
def app_with_overrides(fake_redis, clock):
    """App with Redis and clock overridden for testing."""
    from prr_engine.api import dependencies

    app.dependency_overrides[dependencies.get_redis_client] = lambda: fake_redis
    app.dependency_overrides[dependencies.get_clock] = lambda: clock
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def staff_headers():
    return {"X-Actor": "clerk@phillipston.org"}
