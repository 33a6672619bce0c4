"""Audit log dependencies (composition root)."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from member_audit.application.dtos.audit_log import AuditLogFilter
from member_audit.core.config import get_settings
from member_audit.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
)
from member_audit.infrastructure.persistence.repositories import AuditLogRepository


async def get_audit_log_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuditLogRepository:
    """Audit log repository for reads (list, count, export, history, search)."""
    return AuditLogRepository(db, max_page_size=get_settings().audit_max_page_size)


async def get_audit_log_repo_transactional(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> AuditLogRepository:
    """Audit log repository for purges; commits when the route returns normally."""
    return AuditLogRepository(db, max_page_size=get_settings().audit_max_page_size)


def get_audit_filter(
    actor_name: str | None = Query(None, description="Actor name contains (case-insensitive)"),
    exclude_actor_name: str | None = Query(None, description="Hide this exact actor"),
    entity_type: str | None = Query(None, description="Filter by entity type"),
    action: str | None = Query(None, description="Filter by action"),
    from_timestamp: datetime | None = Query(None, description="From (inclusive) ISO8601"),
    to_timestamp: datetime | None = Query(None, description="To (inclusive) ISO8601"),
    critical_only: bool = Query(False, description="Only security-critical entries"),
) -> AuditLogFilter:
    """Shared query filter for list, count, export, and timeline."""
    return AuditLogFilter(
        actor_name=actor_name,
        exclude_actor_name=exclude_actor_name,
        entity_type=entity_type,
        action=action,
        from_timestamp=from_timestamp,
        to_timestamp=to_timestamp,
        critical_only=critical_only,
    )
