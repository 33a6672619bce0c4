"""DTOs for the audit trail (write model, read model, filters, display)."""

from dataclasses import dataclass, field
from datetime import datetime

from member_audit.shared.context import ANONYMOUS, ActorSnapshot
from member_audit.shared.enums import AuditAction
from member_audit.shared.utils.datetime import ensure_utc


@dataclass(frozen=True)
class FieldChange:
    """One changed field, values already rendered to text (None = no value)."""

    field_name: str
    old_value: str | None
    new_value: str | None


@dataclass(frozen=True)
class DiffResult:
    """Output of the diff engine for one entity."""

    changes: tuple[FieldChange, ...]
    is_critical: bool
    deleted: bool = False


@dataclass(frozen=True)
class AuditLogEntryCreate:
    """Input for appending one audit log record. Append-only; no update."""

    entity_type: str
    entity_id: int | None
    action: AuditAction
    timestamp: datetime
    changes: tuple[FieldChange, ...] = ()
    is_critical: bool = False
    deleted_marker: bool = False
    entity_display_name: str | None = None
    actor: ActorSnapshot = ANONYMOUS


@dataclass(frozen=True)
class AuditLogResult:
    """Single persisted audit log entry (read-model for list/get/display)."""

    id: int
    entity_type: str
    entity_id: int | None
    action: str
    actor_id: str | None
    actor_name: str | None
    timestamp: datetime
    is_critical: bool
    changes: tuple[FieldChange, ...] = ()
    entity_display_name: str | None = None

    def get_change(self, field_name: str) -> FieldChange | None:
        for change in self.changes:
            if change.field_name == field_name:
                return change
        return None


@dataclass(frozen=True)
class AuditLogFilter:
    """Filters shared by list, count, and export.

    actor_name matches as a substring; exclude_actor_name is exact and keeps
    entries without an actor.
    """

    actor_name: str | None = None
    exclude_actor_name: str | None = None
    entity_type: str | None = None
    action: str | None = None
    from_timestamp: datetime | None = None
    to_timestamp: datetime | None = None
    critical_only: bool = False

    @property
    def is_empty_range(self) -> bool:
        return (
            self.from_timestamp is not None
            and self.to_timestamp is not None
            and ensure_utc(self.from_timestamp) > ensure_utc(self.to_timestamp)
        )


@dataclass(frozen=True)
class DisplayEntry:
    """An audit entry as shown on the timeline."""

    entry: AuditLogResult
    display_action: str
    show_logged_in_badge: bool = False
    collapsed: tuple[int, ...] = field(default=())
