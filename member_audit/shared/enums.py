"""Shared enumerations for the auditing engine.

Cross-cutting enums used by application and infrastructure: the audit
action vocabulary and the per-field classification axis.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class AuditAction(_ValuesMixin, str, Enum):
    """What happened to the audited entity. Values are stored verbatim."""

    CREATED = "Created"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    ROLE_ADDED = "Role Added"
    ROLE_REMOVED = "Role Removed"


class FieldClassification(_ValuesMixin, str, Enum):
    """How a single entity field takes part in an audit diff.

    NORMAL fields are shown. CRITICAL fields are shown and flag the entry.
    EXCLUDED fields are never shown but still flag the entry. IGNORED fields
    are bookkeeping: never shown, never critical, never count as a change.
    """

    NORMAL = "normal"
    CRITICAL = "critical"
    EXCLUDED = "excluded"
    IGNORED = "ignored"


class EntityState(_ValuesMixin, str, Enum):
    """Unit-of-work state of an entity taking part in a save."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    UNCHANGED = "unchanged"
