"""Audit log ORM model. One row per captured change; append-only.

Rows are only ever removed by an explicit purge (single delete or truncate
through the repository); updates are refused.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, Connection, DateTime, Index, Integer, String, Text, event
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from member_audit.domain.exceptions import AuditLogImmutableException
from member_audit.infrastructure.persistence.database import Base


class AuditLog(Base):
    """Audit log entry: who changed what, when, and whether it was critical."""

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    entity_display_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    actor_id: Mapped[str | None] = mapped_column(String(256), nullable=True)
    actor_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # JSON object {field: {"Old": ..., "New": ...}}; "_Deleted": true marks deletions.
    changes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_critical: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_audit_log_timestamp", "timestamp"),
        Index("ix_audit_log_entity", "entity_type", "entity_id"),
        Index("ix_audit_log_actor_name", "actor_name"),
    )


@event.listens_for(AuditLog, "before_update")
def _prevent_audit_log_updates(
    _mapper: Mapper[Any], _connection: Connection, target: AuditLog
) -> None:
    """Audit log entries are append-only; updates are forbidden."""
    raise AuditLogImmutableException(target.id)
