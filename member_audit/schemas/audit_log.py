"""Request/response schemas for audit log API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FieldChangeResponse(BaseModel):
    """One changed field; values are display text (null = no value)."""

    model_config = ConfigDict(from_attributes=True)

    field_name: str
    old_value: str | None = None
    new_value: str | None = None


class AuditLogEntryResponse(BaseModel):
    """Single audit log entry (read)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    entity_type: str
    entity_id: int | None = None
    entity_display_name: str | None = None
    action: str
    actor_id: str | None = None
    actor_name: str | None = None
    timestamp: datetime
    is_critical: bool
    changes: list[FieldChangeResponse] = Field(default_factory=list)


class AuditLogListResponse(BaseModel):
    """Paginated list of audit log entries."""

    items: list[AuditLogEntryResponse]
    page: int
    page_size: int
    total: int


class AuditLogCountResponse(BaseModel):
    total: int


class AuditLogPurgeResponse(BaseModel):
    """Result of DELETE (single entry or truncate)."""

    deleted: int


class TimelineEntryResponse(BaseModel):
    """Audit entry as shown on the timeline (after login debouncing)."""

    model_config = ConfigDict(from_attributes=True)

    entry: AuditLogEntryResponse
    display_action: str
    show_logged_in_badge: bool = False
    collapsed: list[int] = Field(default_factory=list)


class TimelineResponse(BaseModel):
    items: list[TimelineEntryResponse]
    page: int
    page_size: int
