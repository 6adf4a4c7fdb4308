import os
from collections.abc import AsyncGenerator, Iterator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hirepath.models import Base
from hirepath.models.candidate import CandidateProfile
from hirepath.models.enums import CandidateStatus
from hirepath.notifications import factory

# In-memory SQLite by default; point at PostgreSQL with TEST_DATABASE_URL.
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _enable_sqlite_savepoints(engine) -> None:
    """Let pysqlite emit BEGIN itself so SAVEPOINTs work.

    The driver's own transaction handling defeats SAVEPOINT; SQLAlchemy
    documents this pair of event hooks as the workaround.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a fresh test database engine with all tables."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        _enable_sqlite_savepoints(engine)
    else:
        engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


# =============================================================================
# Notifier
# =============================================================================


@pytest.fixture
def mock_notifier() -> Iterator[AsyncMock]:
    """Notifier whose sends all succeed, injected into the factory singleton.

    Yields:
        AsyncMock with send_offer_email, send_rejection_email and
        send_reach_out_email returning True.
    """
    mock = AsyncMock()
    mock.send_offer_email.return_value = True
    mock.send_rejection_email.return_value = True
    mock.send_reach_out_email.return_value = True

    factory.set_notifier(mock)

    yield mock

    factory.reset_notifier()


# =============================================================================
# Candidate factories
# =============================================================================


@pytest.fixture
def make_candidate(db_session: AsyncSession):
    """Factory for candidates inserted directly (no account, no side effects)."""

    async def _make(
        *,
        first_name: str = "Jordan",
        last_name: str = "Reyes",
        email: str | None = "jordan.reyes@example.com",
        status: CandidateStatus = CandidateStatus.NEW,
        forty_hour_course_completed: bool = False,
        schedule_completed: bool = False,
    ) -> CandidateProfile:
        candidate = CandidateProfile(
            first_name=first_name,
            last_name=last_name,
            email=email,
            status=status,
            forty_hour_course_completed=forty_hour_course_completed,
            schedule_completed=schedule_completed,
        )
        db_session.add(candidate)
        await db_session.flush()
        await db_session.refresh(candidate)
        return candidate

    return _make


@pytest_asyncio.fixture
async def interviewed_candidate(make_candidate) -> CandidateProfile:
    """Candidate ready to be hired, without the 40-hour course."""
    return await make_candidate(status=CandidateStatus.INTERVIEW_COMPLETED)


# =============================================================================
# API Test Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def client(
    db_engine, mock_notifier: AsyncMock  # noqa: ARG001 - keeps emails offline
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test database.

    Each request gets its own session that commits on success, matching
    the production ``get_db`` dependency. Tests using this fixture seed
    data through the API rather than ``db_session``.

    Yields:
        Configured AsyncClient.
    """
    from hirepath.core.database import get_db
    from hirepath.main import app

    test_session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
