"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool stays valid across the session. The whole
directory is skipped when DATABASE_URL is unreachable.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.main import app
from src.sf_common.database import async_session_factory, engine
from src.sf_gateway.auth.jwt_handler import create_access_token

_INSERT_PROJECT_SQL = text("""
    INSERT INTO projects
        (id, title, location, capacity_kw, price_per_share,
         available_shares, sold_shares, expected_roi_bps, status)
    VALUES
        (:id, :title, 'Test Site', 10, :price, :available, 0, 1200, 'active')
""")


def pytest_collection_modifyitems(items):
    for item in items:
        if "tests/integration" in str(item.fspath).replace("\\", "/"):
            item.add_marker(pytest.mark.integration)


@pytest_asyncio.fixture(loop_scope="session", scope="session", autouse=True)
async def _require_database() -> None:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM projects LIMIT 1"))
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"database not available: {exc}")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client - keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def buyer_headers() -> dict[str, str]:
    buyer_id = f"buyer-{uuid.uuid4().hex[:8]}"
    return {"Authorization": f"Bearer {create_access_token(buyer_id)}"}


@pytest.fixture
def new_project():
    """Factory inserting a fresh active project; returns its id."""

    async def _create(available: int = 100, price: int = 1000) -> str:
        project_id = f"PRJ-IT-{uuid.uuid4().hex[:10]}"
        async with async_session_factory() as session:
            await session.execute(
                _INSERT_PROJECT_SQL,
                {"id": project_id, "title": f"IT {project_id}", "price": price,
                 "available": available},
            )
            await session.commit()
        return project_id

    return _create
