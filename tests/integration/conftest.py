"""Integration-test fixtures.

These tests need a migrated PostgreSQL and a Redis (docker compose up -d && alembic upgrade head)
and only run when CARTIFY_INTEGRATION=1. All of them share one event loop so
the module-level SQLAlchemy engine pool and Redis pool stay valid.
"""

import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app

_ENABLED = os.environ.get("CARTIFY_INTEGRATION") == "1"
_ADMIN_PASSKEY = os.environ["ADMIN_PASSKEY"]


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if _ENABLED:
        return
    skip = pytest.mark.skip(reason="set CARTIFY_INTEGRATION=1 with PostgreSQL and Redis up")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register_and_login(client: AsyncClient, role: str) -> dict[str, str]:
    """Register a fresh user with *role*; return auth headers plus the user id."""
    uid = uuid.uuid4().hex[:8]
    body: dict[str, str] = {
        "name": f"{role} {uid}",
        "email": f"{role}_{uid}@example.com",
        "password": "TestPass123",
        "role": role,
    }
    if role == "admin":
        body["admin_passkey"] = _ADMIN_PASSKEY
    else:
        body.update(
            phone="555-0100", country="US", state="IL", city="Springfield",
            address1="1 Main St",
        )
    reg = await client.post("/api/v1/auth/register", json=body)
    assert reg.status_code == 201, reg.text
    login = await client.post(
        "/api/v1/auth/login", json={"email": body["email"], "password": body["password"]}
    )
    token = login.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}", "user_id": reg.json()["data"]["user_id"]}


@pytest.fixture
def make_user(client: AsyncClient):
    async def _make(role: str) -> tuple[dict[str, str], str]:
        info = await register_and_login(client, role)
        user_id = info.pop("user_id")
        return info, user_id

    return _make
