"""
Top-level pytest configuration.

Provides:
  - A test SQLite database (aiosqlite) with all tables created fresh per session.
  - A db_session fixture that rolls back each test in a transaction.
  - An async_client fixture wired to the FastAPI app with Redis and ARQ
    mocked out.
  - Seeded candidate/recruiter/profile/job fixtures and their auth headers.
"""

from __future__ import annotations

import os
import uuid
from typing import AsyncGenerator
from unittest.mock import AsyncMock

# ---------------------------------------------------------------------------
# Environment must be set BEFORE any swipematch module is imported so that
# pydantic-settings picks up the test values.
# ---------------------------------------------------------------------------
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-32c")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)


# ---------------------------------------------------------------------------
# Session-scoped test engine (SQLite in-memory, shared via StaticPool so all
# connections see the same data within a test process).
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def engine():
    """Create the SQLite test engine and all tables once per test session."""
    from swipematch.core.database import Base
    import swipematch.models  # noqa: F401  (registers every table on Base.metadata)

    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    if test_engine.dialect.name == "sqlite":
        # pysqlite emits its own BEGIN lazily and SAVEPOINT breaks under it
        @event.listens_for(test_engine.sync_engine, "connect")
        def _disable_driver_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(test_engine.sync_engine, "begin")
        def _emit_begin(conn):
            conn.exec_driver_sql("BEGIN")

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


# ---------------------------------------------------------------------------
# Per-test DB session that rolls back after each test for isolation.
#
# commit() is overridden to only flush, so service code that commits never
# actually commits to the database; all writes stay in the outer
# transaction, which is rolled back at teardown.
# ---------------------------------------------------------------------------
class _NonCommittingSession(AsyncSession):
    """AsyncSession subclass where commit() becomes flush()."""

    async def commit(self) -> None:  # type: ignore[override]
        await self.flush()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a per-test database session that is fully rolled back on teardown."""
    async with engine.connect() as conn:
        await conn.begin()

        session = _NonCommittingSession(
            bind=conn,
            expire_on_commit=False,
        )

        try:
            yield session
        finally:
            await session.close()
            await conn.rollback()


# ---------------------------------------------------------------------------
# Redis mock: fakeredis backs the rate limiter.
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def mock_redis(monkeypatch):
    """Replace the Redis client with an in-process fakeredis instance."""
    import fakeredis

    fake_redis = fakeredis.FakeAsyncRedis(decode_responses=True)

    async def _get_redis():
        return fake_redis

    monkeypatch.setattr("swipematch.core.cache.get_redis", _get_redis)
    return fake_redis


# ---------------------------------------------------------------------------
# ARQ task queue mock: analytics enqueueing never reaches Redis.
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def mock_arq(monkeypatch):
    """Stub out the ARQ task queue and expose it for assertions."""
    fake_arq = AsyncMock()
    fake_arq.enqueue_job = AsyncMock(return_value=None)

    async def _get_arq_pool():
        return fake_arq

    monkeypatch.setattr("swipematch.core.arq.get_arq_pool", _get_arq_pool)
    return fake_arq


@pytest_asyncio.fixture(autouse=True)
async def drain_background():
    """Let fire-and-forget tasks finish inside the test that scheduled them."""
    yield
    from swipematch.core.background import drain_background_tasks
    await drain_background_tasks()


@pytest.fixture(autouse=True)
def fresh_connection_manager(monkeypatch):
    """Isolate WebSocket group state per test."""
    from swipematch.core import websocket_manager as ws_mod
    from swipematch.services import notification_service as notif_mod
    from swipematch.api.v1.websocket import endpoints as ws_endpoints

    manager = ws_mod.ConnectionManager()
    monkeypatch.setattr(ws_mod, "connection_manager", manager)
    monkeypatch.setattr(notif_mod, "connection_manager", manager)
    monkeypatch.setattr(ws_endpoints, "connection_manager", manager)
    return manager


# ---------------------------------------------------------------------------
# Override FastAPI database dependency to use the test session.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an httpx AsyncClient backed by the FastAPI app.

    The app's get_db dependency is overridden to yield the test session so all
    requests in a test share the same transactional session and thus see any
    data seeded in that test.
    """
    from swipematch.core.database import get_db
    from swipematch.main import app

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seeded fixtures
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def candidate(db_session: AsyncSession):
    """Persisted candidate user."""
    from tests.factories import CandidateFactory
    return await CandidateFactory.create_async(db_session, email="candidate@example.com")


@pytest_asyncio.fixture
async def candidate_profile(db_session: AsyncSession, candidate):
    """Profile owned by the candidate fixture (what recruiters swipe on)."""
    from tests.factories import CandidateProfileFactory
    return await CandidateProfileFactory.create_async(db_session, user_id=candidate.id)


@pytest_asyncio.fixture
async def recruiter(db_session: AsyncSession):
    """Persisted recruiter user with the default 30-day cooldown."""
    from tests.factories import RecruiterFactory
    return await RecruiterFactory.create_async(db_session, email="recruiter@example.com")


@pytest_asyncio.fixture
async def job(db_session: AsyncSession, recruiter):
    """Open job owned by the recruiter fixture."""
    from tests.factories import JobFactory
    return await JobFactory.create_async(db_session, recruiter_id=recruiter.id)


def _token_for(user) -> str:
    from swipematch.core.security import create_access_token
    return create_access_token(data={"sub": str(user.id), "role": user.role.value})


@pytest.fixture
def candidate_headers(candidate) -> dict[str, str]:
    """Authorization headers for the candidate user."""
    return {"Authorization": f"Bearer {_token_for(candidate)}"}


@pytest.fixture
def recruiter_headers(recruiter) -> dict[str, str]:
    """Authorization headers for the recruiter user."""
    return {"Authorization": f"Bearer {_token_for(recruiter)}"}


@pytest.fixture
def auth_headers_for():
    """Build Authorization headers for any persisted user."""
    def _headers(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {_token_for(user)}"}
    return _headers


@pytest.fixture
def unknown_id() -> uuid.UUID:
    return uuid.uuid4()
