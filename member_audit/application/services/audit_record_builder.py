"""Audit record builder: one AuditLogEntryCreate per changed entity or join row.

Ordinary entities get Created / Modified / Deleted entries from the diff
engine. User<->role join rows get Role Added / Role Removed entries whose
changes carry the resolved username and role name, never the raw ids.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from member_audit.application.dtos.audit_log import AuditLogEntryCreate, FieldChange
from member_audit.application.services.change_diff import ChangeDiffEngine
from member_audit.application.services.relationship_resolver import (
    USER_ROLE_ENTITY_TYPE,
    RelationshipResolver,
)
from member_audit.shared.context import ANONYMOUS, ActorSnapshot
from member_audit.shared.enums import AuditAction, EntityState
from member_audit.shared.utils.datetime import utc_now

_ACTION_BY_STATE = {
    EntityState.ADDED: AuditAction.CREATED,
    EntityState.MODIFIED: AuditAction.MODIFIED,
    EntityState.DELETED: AuditAction.DELETED,
}

DISPLAY_NAME_MAX_LENGTH = 100


def truncate_display_name(name: str | None) -> str | None:
    if not name:
        return None
    if len(name) > DISPLAY_NAME_MAX_LENGTH:
        return name[:DISPLAY_NAME_MAX_LENGTH] + "..."
    return name


class AuditRecordBuilder:
    """Assembles audit entries; stamps actor snapshot and UTC time at build."""

    def __init__(
        self,
        diff_engine: ChangeDiffEngine,
        resolver: RelationshipResolver,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.diff_engine = diff_engine
        self.resolver = resolver
        self._clock = clock

    def build_for_entity(
        self,
        entity_type: str,
        state: EntityState,
        *,
        entity_id: int | None = None,
        display_name: str | None = None,
        values: Iterable[tuple[str, Any]] = (),
        modified: Iterable[tuple[str, Any, Any]] = (),
        actor: ActorSnapshot = ANONYMOUS,
    ) -> AuditLogEntryCreate | None:
        """Build the entry for an ordinary entity, or None when nothing is worth logging.

        Args:
            entity_type: Logical entity name (mapped class name).
            state: Unit-of-work state; UNCHANGED never produces an entry.
            entity_id: Integer primary key when known.
            display_name: Human label for the entity (title, name, ...).
            values: (field, value) pairs; current values for ADDED, last
                loaded values for DELETED.
            modified: (field, old, new) triples for MODIFIED.
            actor: Who is making the change.
        """
        if state is EntityState.ADDED:
            diff = self.diff_engine.diff_created(entity_type, values)
        elif state is EntityState.MODIFIED:
            diff = self.diff_engine.diff_modified(entity_type, modified)
            if diff is None:
                return None
        elif state is EntityState.DELETED:
            diff = self.diff_engine.diff_deleted(entity_type, values)
        else:
            return None

        return AuditLogEntryCreate(
            entity_type=entity_type,
            entity_id=entity_id,
            action=_ACTION_BY_STATE[state],
            timestamp=self._clock(),
            changes=diff.changes,
            is_critical=diff.is_critical or state is EntityState.DELETED,
            deleted_marker=diff.deleted,
            entity_display_name=truncate_display_name(display_name),
            actor=actor,
        )

    def build_for_role_link(
        self,
        state: EntityState,
        *,
        user_id: str,
        role_id: str,
        actor: ActorSnapshot = ANONYMOUS,
    ) -> AuditLogEntryCreate | None:
        """Build a Role Added / Role Removed entry. Always critical."""
        if state is EntityState.ADDED:
            action = AuditAction.ROLE_ADDED
        elif state is EntityState.DELETED:
            action = AuditAction.ROLE_REMOVED
        else:
            return None

        username, role_name = self.resolver.resolve_display_pair(
            USER_ROLE_ENTITY_TYPE, user_id, role_id
        )
        if action is AuditAction.ROLE_ADDED:
            changes = (
                FieldChange("Username", None, username),
                FieldChange("Role", None, role_name),
            )
        else:
            changes = (
                FieldChange("Username", username, None),
                FieldChange("Role", role_name, None),
            )
        return AuditLogEntryCreate(
            entity_type=USER_ROLE_ENTITY_TYPE,
            entity_id=None,
            action=action,
            timestamp=self._clock(),
            changes=changes,
            is_critical=True,
            entity_display_name=truncate_display_name(f"{username} - {role_name}"),
            actor=actor,
        )
