"""Protocols implemented by infrastructure (DIP)."""

from member_audit.application.interfaces.repositories import (
    IAuditLogRepository,
    IDisplayNameLookup,
)

__all__ = ["IAuditLogRepository", "IDisplayNameLookup"]
