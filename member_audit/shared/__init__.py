"""Shared utilities: actor context, enums, telemetry, and UTC helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from member_audit.shared.context import (
    ANONYMOUS,
    ActorContext,
    ActorSnapshot,
    current_actor,
    get_actor_context,
    reset_actor_context,
    use_actor_context,
)
from member_audit.shared.enums import AuditAction, EntityState, FieldClassification
from member_audit.shared.utils import ensure_utc, parse_iso_utc, utc_now

__all__ = [
    "ANONYMOUS",
    "ActorContext",
    "ActorSnapshot",
    "current_actor",
    "get_actor_context",
    "reset_actor_context",
    "use_actor_context",
    "AuditAction",
    "EntityState",
    "FieldClassification",
    "ensure_utc",
    "parse_iso_utc",
    "utc_now",
]
