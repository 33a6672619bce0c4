"""SQLAlchemy repository implementations."""

from member_audit.infrastructure.persistence.repositories.audit_log_repo import (
    AuditLogRepository,
    entry_to_orm,
)

__all__ = ["AuditLogRepository", "entry_to_orm"]
