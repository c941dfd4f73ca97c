"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness check sees the test engine
    - Open editors are cleared between tests

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares the one connection
      that holds the schema
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

import smartshooter.models  # noqa: F401  (registers tables on Base.metadata)
from smartshooter.db.base import Base
from smartshooter.infrastructure.database import get_db, DatabaseSessionManager
from smartshooter.api.routes import editors
import smartshooter.infrastructure.database as db_module
from smartshooter.main import app


USER = {"X-User-Id": "player-1"}


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    editors._editors.clear()


@pytest.fixture
def draft_payload():
    return {
        "date": "2024-03-05",
        "training_type": "spot",
        "zone_group": "3PT",
        "notes": "morning",
        "rounds": [
            {"idx": 0, "zone": "Left Corner", "attempts": 10, "made": 6},
            {"idx": 1, "zone": "Top of Key 3pt", "attempts": 10, "made": 3},
        ],
    }


@pytest.fixture
async def saved_session(client, draft_payload):
    resp = await client.post("/api/v1/sessions", json=draft_payload, headers=USER)
    assert resp.status_code == 201
    return resp.json()
