"""Application DTOs (frozen dataclasses crossing layer boundaries)."""

from member_audit.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilter,
    AuditLogResult,
    DiffResult,
    DisplayEntry,
    FieldChange,
)

__all__ = [
    "AuditLogEntryCreate",
    "AuditLogFilter",
    "AuditLogResult",
    "DiffResult",
    "DisplayEntry",
    "FieldChange",
]
