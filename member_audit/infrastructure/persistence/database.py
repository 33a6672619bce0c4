"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Engine and session factory are created lazily on first use (get_db /
get_db_transactional) so import does not trigger Settings validation.

Sessions are built on AuditedSession, the sync Session class the save
interceptor listens on (see audit_interceptor.install_audit_hooks). The
interceptor runs inside the same flush as the business rows, so audit rows
commit and roll back with them.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Session
from sqlalchemy.pool import StaticPool

from member_audit.core.config import get_settings
from member_audit.shared.context import ActorContext

logger = logging.getLogger(__name__)

ACTOR_CONTEXT_KEY = "actor_context"

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: Any = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


class AuditedSession(Session):
    """Sync session class carrying the save interceptor's flush hooks."""


def bind_actor_context(session: Session | AsyncSession, context: ActorContext | None) -> None:
    """Attach an explicit actor context to a session (overrides the task-bound one)."""
    target = session.sync_session if isinstance(session, AsyncSession) else session
    if context is None:
        target.info.pop(ACTOR_CONTEXT_KEY, None)
    else:
        target.info[ACTOR_CONTEXT_KEY] = context


def make_session_factory(bind: Any) -> async_sessionmaker[AsyncSession]:
    """Session factory whose sessions run the save interceptor when it is installed."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        sync_session_class=AuditedSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if settings.database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in settings.database_url or settings.database_url.endswith("://"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(pool_pre_ping=True, pool_size=20, max_overflow=30, pool_recycle=3600)
    engine = create_async_engine(settings.database_url, **kwargs)
    AsyncSessionLocal = make_session_factory(engine)
    logger.info("Database engine created (backend=%s)", engine.url.get_backend_name())


async def create_all() -> None:
    """Create all tables (local runs and tests; production uses managed schemas)."""
    from member_audit.infrastructure.persistence import models  # noqa: F401

    _ensure_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        yield session


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    Use for POST, PUT, PATCH, DELETE endpoints.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        async with session.begin():
            yield session
