"""Shared pytest fixtures for integration tests."""

import os
import uuid

import pytest

# Load .env so DATABASE_URL, SECRET_KEY are available for the requires_db check
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass
from httpx import ASGITransport, AsyncClient

from billbook.main import app
from billbook.config import settings

# Integration tests need a migrated database (alembic upgrade head)
requires_db = pytest.mark.skipif(
    not os.getenv("DATABASE_URL") or not os.getenv("SECRET_KEY"),
    reason="DATABASE_URL and SECRET_KEY must be set",
)


def _get_api_base() -> str:
    """API base URL. With TEST_USE_LIVE_SERVER=true, hit a running server instead of the ASGI app."""
    if os.getenv("TEST_USE_LIVE_SERVER", "").lower() == "true":
        base = os.getenv("LIVE_SERVER_URL", "http://localhost:8000")
        return f"{base}{settings.API_V1_PREFIX}"
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
def api_base() -> str:
    return _get_api_base()


@pytest.fixture
async def async_client(api_base: str):
    use_live = os.getenv("TEST_USE_LIVE_SERVER", "").lower() == "true"
    if use_live:
        client = AsyncClient(base_url=api_base, timeout=30.0)
    else:
        transport = ASGITransport(app=app)
        client = AsyncClient(transport=transport, base_url=api_base, timeout=30.0)
    yield client
    await client.aclose()


@pytest.fixture
def unique_suffix() -> str:
    """Unique suffix for test data to avoid collisions."""
    return str(uuid.uuid4())[:8]


@pytest.fixture
async def registered_user(async_client: AsyncClient, api_base: str, unique_suffix: str):
    """
    Register and log in a user; return email, password, user_id and auth headers.
    """
    email = f"user_{unique_suffix}@test.example.com"
    password = "TestPassword123!"

    resp = await async_client.post(
        f"{api_base}/auth/register",
        json={"email": email, "password": password},
    )
    assert resp.status_code == 200, resp.text

    login_resp = await async_client.post(
        f"{api_base}/auth/login",
        json={"email": email, "password": password},
    )
    assert login_resp.status_code == 200, login_resp.text
    data = login_resp.json()["data"]

    return {
        "email": email,
        "password": password,
        "user_id": data["user_id"],
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
    }


@pytest.fixture
async def bill_id(async_client: AsyncClient, api_base: str, registered_user: dict, unique_suffix: str):
    """Create a bill with three ad-hoc participants; return its id."""
    resp = await async_client.post(
        f"{api_base}/bills",
        headers=registered_user["headers"],
        json={
            "title": f"Trip {unique_suffix}",
            "start_date": "2025-03-01",
            "end_date": "2025-03-05",
            "participants": [{"name": "An"}, {"name": "Binh"}, {"name": "Chi"}],
        },
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]["id"]
