"""Pytest configuration and fixtures for member_audit.

Every DB-backed test gets a fresh in-memory SQLite database (aiosqlite,
StaticPool so all sessions share one connection) and the save interceptor
installed with a controllable clock. HTTP tests run the app over
httpx.ASGITransport with the DB dependencies pointed at that database.
"""

from collections.abc import AsyncIterator, Iterator
from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from member_audit.infrastructure.persistence import models  # noqa: F401
from member_audit.infrastructure.persistence.audit_interceptor import (
    AuditSaveInterceptor,
    install_audit_hooks,
    uninstall_audit_hooks,
)
from member_audit.infrastructure.persistence.database import (
    Base,
    get_db,
    get_db_transactional,
    make_session_factory,
)

TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeClock:
    """Deterministic UTC clock; call it like utc_now()."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory database with every table created."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest.fixture
def audit_hooks(clock: FakeClock) -> Iterator[AuditSaveInterceptor]:
    """Save interceptor installed on the session class for the test's duration."""
    interceptor = install_audit_hooks(interceptor=AuditSaveInterceptor(clock=clock))
    yield interceptor
    uninstall_audit_hooks()


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
    audit_hooks: AuditSaveInterceptor,
) -> AsyncIterator[AsyncSession]:
    """Audited session for repository/integration tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    audit_hooks: AuditSaveInterceptor,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI), backed by the test database."""
    from member_audit.main import create_app

    app = create_app()

    async def _get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    async def _get_db_transactional() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_db_transactional] = _get_db_transactional

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
