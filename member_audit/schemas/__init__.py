"""Pydantic request/response schemas for the HTTP API."""

from member_audit.schemas.audit_log import (
    AuditLogCountResponse,
    AuditLogEntryResponse,
    AuditLogListResponse,
    AuditLogPurgeResponse,
    FieldChangeResponse,
    TimelineEntryResponse,
    TimelineResponse,
)
from member_audit.schemas.health import HealthResponse

__all__ = [
    "AuditLogCountResponse",
    "AuditLogEntryResponse",
    "AuditLogListResponse",
    "AuditLogPurgeResponse",
    "FieldChangeResponse",
    "HealthResponse",
    "TimelineEntryResponse",
    "TimelineResponse",
]
