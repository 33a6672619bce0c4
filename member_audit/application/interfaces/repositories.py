"""Repository protocols for the audit trail.

The application layer depends on these; infrastructure provides the
SQLAlchemy implementations.
"""

from __future__ import annotations

from typing import Protocol

from member_audit.application.dtos.audit_log import AuditLogFilter, AuditLogResult


class IDisplayNameLookup(Protocol):
    """Read access used to turn a foreign-key id into a display name."""

    def display_name(self, kind: str, entity_id: str) -> str | None:
        """Return the display name for (kind, id), or None when unknown."""
        ...


class IAuditLogRepository(Protocol):
    """Query surface over persisted audit entries (newest first)."""

    async def list(
        self, audit_filter: AuditLogFilter, *, page: int = 1, page_size: int = 100
    ) -> list[AuditLogResult]: ...

    async def count(self, audit_filter: AuditLogFilter) -> int: ...

    async def export(self, audit_filter: AuditLogFilter) -> list[AuditLogResult]: ...

    async def entity_history(self, entity_type: str, entity_id: int) -> list[AuditLogResult]: ...

    async def search_changes(
        self, term: str, *, page: int = 1, page_size: int = 100
    ) -> list[AuditLogResult]: ...

    async def distinct_entity_types(self) -> list[str]: ...

    async def distinct_actions(self) -> list[str]: ...

    async def distinct_actor_names(self) -> list[str]: ...

    async def delete(self, entry_id: int) -> bool: ...

    async def truncate(self) -> int: ...

    async def truncate_by_actor(self, actor_name: str) -> int: ...
