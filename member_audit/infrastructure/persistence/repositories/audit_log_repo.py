"""Audit log repository. Append-only writes; read/report queries; explicit purge.

Implements IAuditLogRepository. The reporting path never raises for bad
input: invalid pages and inverted date ranges return empty results.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from member_audit.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilter,
    AuditLogResult,
)
from member_audit.domain.exceptions import ValidationException
from member_audit.infrastructure.persistence.changes_codec import (
    decode_changes,
    encode_changes,
)
from member_audit.infrastructure.persistence.models.audit_log import AuditLog
from member_audit.shared.telemetry.logging import get_logger
from member_audit.shared.utils.datetime import ensure_utc

_logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 500


def entry_to_orm(entry: AuditLogEntryCreate) -> AuditLog:
    """Map an application write DTO to a new (unsaved) ORM row."""
    return AuditLog(
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        entity_display_name=entry.entity_display_name,
        action=entry.action.value,
        actor_id=entry.actor.user_id,
        actor_name=entry.actor.name,
        timestamp=entry.timestamp,
        changes=encode_changes(entry.changes, entry.deleted_marker),
        is_critical=entry.is_critical,
    )


def _orm_to_result(row: AuditLog) -> AuditLogResult:
    """Map ORM to application DTO."""
    changes, _deleted = decode_changes(row.changes)
    return AuditLogResult(
        id=row.id,
        entity_type=row.entity_type,
        entity_id=row.entity_id,
        action=row.action,
        actor_id=row.actor_id,
        actor_name=row.actor_name,
        timestamp=ensure_utc(row.timestamp),
        is_critical=row.is_critical,
        changes=changes,
        entity_display_name=row.entity_display_name,
    )


def _present(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


class AuditLogRepository:
    """Audit log queries. Rows are never updated; purge is delete/truncate only."""

    def __init__(self, db: AsyncSession, max_page_size: int = MAX_PAGE_SIZE) -> None:
        self.db = db
        self.max_page_size = max_page_size

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one audit log entry; return created record."""
        row = entry_to_orm(entry)
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    def _conditions(self, audit_filter: AuditLogFilter) -> list[Any]:
        conditions: list[Any] = []
        actor_name = _present(audit_filter.actor_name)
        if actor_name is not None:
            conditions.append(AuditLog.actor_name.is_not(None))
            conditions.append(AuditLog.actor_name.icontains(actor_name, autoescape=True))
        exclude_actor_name = _present(audit_filter.exclude_actor_name)
        if exclude_actor_name is not None:
            conditions.append(
                or_(
                    AuditLog.actor_name.is_(None),
                    AuditLog.actor_name != exclude_actor_name,
                )
            )
        entity_type = _present(audit_filter.entity_type)
        if entity_type is not None:
            conditions.append(AuditLog.entity_type == entity_type)
        action = _present(audit_filter.action)
        if action is not None:
            conditions.append(AuditLog.action == action)
        if audit_filter.from_timestamp is not None:
            conditions.append(AuditLog.timestamp >= ensure_utc(audit_filter.from_timestamp))
        if audit_filter.to_timestamp is not None:
            conditions.append(AuditLog.timestamp <= ensure_utc(audit_filter.to_timestamp))
        if audit_filter.critical_only:
            conditions.append(AuditLog.is_critical.is_(True))
        return conditions

    def _page_window(self, page: int, page_size: int) -> tuple[int, int] | None:
        """(offset, limit) for a page, or None when the page is out of range."""
        if page < 1 or page_size < 1:
            _logger.debug("Out-of-range audit page %s (size %s); returning none", page, page_size)
            return None
        if page_size > self.max_page_size:
            _logger.debug("Clamping audit page size %s to %s", page_size, self.max_page_size)
            page_size = self.max_page_size
        return (page - 1) * page_size, page_size

    async def list(
        self,
        audit_filter: AuditLogFilter,
        *,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> list[AuditLogResult]:
        """List audit log entries matching the filter (newest first)."""
        window = self._page_window(page, page_size)
        if window is None or audit_filter.is_empty_range:
            return []
        offset, limit = window
        stmt = (
            select(AuditLog)
            .where(*self._conditions(audit_filter))
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def count(self, audit_filter: AuditLogFilter) -> int:
        if audit_filter.is_empty_range:
            return 0
        stmt = (
            select(func.count())
            .select_from(AuditLog)
            .where(*self._conditions(audit_filter))
        )
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def export(self, audit_filter: AuditLogFilter) -> list[AuditLogResult]:
        """All matching entries, unpaginated (newest first)."""
        if audit_filter.is_empty_range:
            return []
        stmt = (
            select(AuditLog)
            .where(*self._conditions(audit_filter))
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        )
        result = await self.db.execute(stmt)
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def entity_history(self, entity_type: str, entity_id: int) -> list[AuditLogResult]:
        """Every entry for one entity (newest first)."""
        stmt = (
            select(AuditLog)
            .where(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        )
        result = await self.db.execute(stmt)
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def search_changes(
        self, term: str, *, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> list[AuditLogResult]:
        """Free-text search over the serialized changes payload. Blank term matches nothing."""
        if _present(term) is None:
            return []
        window = self._page_window(page, page_size)
        if window is None:
            return []
        offset, limit = window
        stmt = (
            select(AuditLog)
            .where(
                AuditLog.changes.is_not(None),
                AuditLog.changes.icontains(term, autoescape=True),
            )
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def _distinct(self, column: Any) -> list[str]:
        stmt = select(column).where(column.is_not(None)).distinct().order_by(column)
        result = await self.db.execute(stmt)
        return [value for value in result.scalars().all()]

    async def distinct_entity_types(self) -> list[str]:
        return await self._distinct(AuditLog.entity_type)

    async def distinct_actions(self) -> list[str]:
        return await self._distinct(AuditLog.action)

    async def distinct_actor_names(self) -> list[str]:
        return await self._distinct(AuditLog.actor_name)

    async def delete(self, entry_id: int) -> bool:
        """Purge one entry. Returns False when it does not exist."""
        result = await self.db.execute(delete(AuditLog).where(AuditLog.id == entry_id))
        return bool(result.rowcount)

    async def truncate(self) -> int:
        """Purge every entry. Returns the number of rows removed."""
        result = await self.db.execute(delete(AuditLog))
        removed = int(result.rowcount or 0)
        _logger.info("Audit log truncated (%d entries)", removed)
        return removed

    async def truncate_by_actor(self, actor_name: str) -> int:
        """Purge every entry attributed exactly to actor_name."""
        if _present(actor_name) is None:
            raise ValidationException("actor_name is required", field="actor_name")
        result = await self.db.execute(delete(AuditLog).where(AuditLog.actor_name == actor_name))
        removed = int(result.rowcount or 0)
        _logger.info("Audit log purged for actor %s (%d entries)", actor_name, removed)
        return removed
