"""Tests for the audit record builder."""

from datetime import UTC, datetime

import pytest

from member_audit.application.services.audit_record_builder import (
    AuditRecordBuilder,
    truncate_display_name,
)
from member_audit.application.services.change_diff import ChangeDiffEngine
from member_audit.application.services.relationship_resolver import RelationshipResolver
from member_audit.shared.context import ANONYMOUS, ActorSnapshot
from member_audit.shared.enums import AuditAction, EntityState

NOW = datetime(2025, 6, 1, 9, 30, tzinfo=UTC)
ALICE = ActorSnapshot(name="alice", user_id="u-alice")

USER_GUID = "6f1c2b1e-3a0d-4f55-9a53-0c8b7f0e2d11"
ROLE_GUID = "d2b5f9a4-8e41-4c7b-b1e2-5a6c3f9e0b77"


class NamesLookup:
    def display_name(self, kind: str, entity_id: str) -> str | None:
        return {("user", USER_GUID): "jdoe", ("role", ROLE_GUID): "Admin"}.get((kind, entity_id))


@pytest.fixture
def builder() -> AuditRecordBuilder:
    return AuditRecordBuilder(
        ChangeDiffEngine(), RelationshipResolver(NamesLookup()), clock=lambda: NOW
    )


def test_created_entry(builder: AuditRecordBuilder) -> None:
    entry = builder.build_for_entity(
        "Album",
        EntityState.ADDED,
        entity_id=3,
        display_name="Blue",
        values=[("title", "Blue")],
        actor=ALICE,
    )
    assert entry is not None
    assert entry.action is AuditAction.CREATED
    assert entry.entity_id == 3
    assert entry.timestamp == NOW
    assert entry.actor == ALICE
    assert not entry.is_critical
    assert entry.entity_display_name == "Blue"


def test_noop_modification_builds_nothing(builder: AuditRecordBuilder) -> None:
    entry = builder.build_for_entity(
        "Album", EntityState.MODIFIED, modified=[("description", None, "")]
    )
    assert entry is None


def test_unchanged_builds_nothing(builder: AuditRecordBuilder) -> None:
    assert builder.build_for_entity("Album", EntityState.UNCHANGED) is None


def test_deleted_entry_is_critical(builder: AuditRecordBuilder) -> None:
    entry = builder.build_for_entity(
        "Event", EntityState.DELETED, entity_id=9, values=[("name", "Gala")]
    )
    assert entry is not None
    assert entry.action is AuditAction.DELETED
    assert entry.is_critical
    assert entry.deleted_marker
    assert entry.actor is ANONYMOUS


def test_role_added_uses_names_never_ids(builder: AuditRecordBuilder) -> None:
    entry = builder.build_for_role_link(
        EntityState.ADDED, user_id=USER_GUID, role_id=ROLE_GUID, actor=ALICE
    )
    assert entry is not None
    assert entry.entity_type == "UserRole"
    assert entry.action is AuditAction.ROLE_ADDED
    assert entry.is_critical
    assert entry.entity_id is None
    assert entry.entity_display_name == "jdoe - Admin"
    values = {c.field_name: (c.old_value, c.new_value) for c in entry.changes}
    assert values == {"Username": (None, "jdoe"), "Role": (None, "Admin")}
    rendered = repr(entry.changes)
    assert USER_GUID not in rendered
    assert ROLE_GUID not in rendered


def test_role_removed_moves_names_to_old(builder: AuditRecordBuilder) -> None:
    entry = builder.build_for_role_link(EntityState.DELETED, user_id=USER_GUID, role_id=ROLE_GUID)
    assert entry is not None
    assert entry.action is AuditAction.ROLE_REMOVED
    values = {c.field_name: (c.old_value, c.new_value) for c in entry.changes}
    assert values == {"Username": ("jdoe", None), "Role": ("Admin", None)}


def test_role_link_modification_builds_nothing(builder: AuditRecordBuilder) -> None:
    assert (
        builder.build_for_role_link(EntityState.MODIFIED, user_id=USER_GUID, role_id=ROLE_GUID)
        is None
    )


def test_truncate_display_name() -> None:
    assert truncate_display_name(None) is None
    assert truncate_display_name("") is None
    assert truncate_display_name("short") == "short"
    long_name = "x" * 150
    assert truncate_display_name(long_name) == "x" * 100 + "..."
