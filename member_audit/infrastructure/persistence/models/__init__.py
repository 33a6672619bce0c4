"""ORM models. Importing this package registers every table on Base.metadata."""

from member_audit.infrastructure.persistence.models.audit_log import AuditLog
from member_audit.infrastructure.persistence.models.catalog import Album, Event
from member_audit.infrastructure.persistence.models.identity import (
    ApplicationUser,
    Role,
    UserRole,
)
from member_audit.infrastructure.persistence.models.mixins import (
    IntIdMixin,
    StampedMixin,
    StampedModel,
)

__all__ = [
    "Album",
    "ApplicationUser",
    "AuditLog",
    "Event",
    "IntIdMixin",
    "Role",
    "StampedMixin",
    "StampedModel",
    "UserRole",
]
