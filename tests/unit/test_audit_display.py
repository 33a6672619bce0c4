"""Tests for the display debouncer (login relabeling and collapsing)."""

from datetime import UTC, datetime, timedelta

from member_audit.application.dtos.audit_log import AuditLogResult, FieldChange
from member_audit.application.services.audit_display import (
    LOGGED_IN_ACTION,
    PROFILE_UPDATED_ACTION,
    debounce_logins,
    describe_entry,
    is_login_signal,
)

T0 = datetime(2025, 2, 1, 10, 0, tzinfo=UTC)


def _entry(
    entry_id: int,
    at: datetime,
    *changes: FieldChange,
    entity_type: str = "ApplicationUser",
    action: str = "Modified",
    user: str | None = "jdoe",
    actor: str | None = "jdoe",
) -> AuditLogResult:
    return AuditLogResult(
        id=entry_id,
        entity_type=entity_type,
        entity_id=None,
        action=action,
        actor_id=None,
        actor_name=actor,
        timestamp=at,
        is_critical=False,
        changes=changes,
        entity_display_name=user,
    )


def _login(entry_id: int, at: datetime, previous: datetime | None = None, **kwargs) -> AuditLogResult:
    old = previous.isoformat() if previous is not None else None
    return _entry(entry_id, at, FieldChange("last_login_date", old, at.isoformat()), **kwargs)


def test_login_only_entry_is_relabeled() -> None:
    item = describe_entry(_login(1, T0))
    assert item.display_action == LOGGED_IN_ACTION
    assert not item.show_logged_in_badge


def test_login_with_other_fields_gets_badge() -> None:
    entry = _entry(
        1,
        T0,
        FieldChange("last_login_date", None, T0.isoformat()),
        FieldChange("first_name", "Ana", "Anna"),
    )
    item = describe_entry(entry)
    assert item.display_action == PROFILE_UPDATED_ACTION
    assert item.show_logged_in_badge


def test_login_that_did_not_advance_is_not_a_signal() -> None:
    entry = _entry(
        1,
        T0,
        FieldChange("last_login_date", T0.isoformat(), (T0 - timedelta(hours=1)).isoformat()),
        FieldChange("first_name", "Ana", "Anna"),
    )
    assert not is_login_signal(entry)
    assert describe_entry(entry).display_action == "Modified"


def test_other_entity_types_are_never_logins() -> None:
    entry = _login(1, T0, entity_type="Album")
    assert not is_login_signal(entry)


def test_two_logins_90_seconds_apart_collapse_to_earliest() -> None:
    first = _login(1, T0)
    second = _login(2, T0 + timedelta(seconds=90), previous=T0)
    result = debounce_logins([first, second])
    assert len(result) == 1
    assert result[0].entry.id == 1
    assert result[0].display_action == LOGGED_IN_ACTION
    assert result[0].collapsed == (2,)


def test_two_logins_3_minutes_apart_stay_distinct() -> None:
    first = _login(1, T0)
    second = _login(2, T0 + timedelta(minutes=3), previous=T0)
    result = debounce_logins([first, second])
    assert [d.entry.id for d in result] == [1, 2]


def test_newest_first_input_keeps_order_and_collapses_earliest() -> None:
    first = _login(1, T0)
    second = _login(2, T0 + timedelta(seconds=60), previous=T0)
    result = debounce_logins([second, first])
    assert [d.entry.id for d in result] == [1]


def test_window_is_measured_from_last_kept_login() -> None:
    """A chain of logins 90s apart: the third is 180s after the kept one and survives."""
    logins = [_login(i + 1, T0 + timedelta(seconds=90 * i)) for i in range(3)]
    result = debounce_logins(logins)
    assert [d.entry.id for d in result] == [1, 3]
    assert result[0].collapsed == (2,)


def test_different_users_are_not_merged() -> None:
    a = _login(1, T0, user="alice", actor="alice")
    b = _login(2, T0 + timedelta(seconds=30), user="bob", actor="bob")
    assert len(debounce_logins([a, b])) == 2


def test_login_never_merges_with_unrelated_event() -> None:
    login = _login(1, T0)
    edit = _entry(2, T0 + timedelta(seconds=10), FieldChange("degree", None, "MSc"))
    result = debounce_logins([login, edit])
    assert [(d.entry.id, d.display_action) for d in result] == [
        (1, LOGGED_IN_ACTION),
        (2, "Modified"),
    ]


def test_non_login_entries_pass_through() -> None:
    created = _entry(1, T0, FieldChange("title", None, "Blue"), entity_type="Album", action="Created")
    result = debounce_logins([created])
    assert result[0].display_action == "Created"
    assert result[0].entry is created


def test_missing_user_and_actor_share_unknown_key() -> None:
    a = _login(1, T0, user=None, actor=None)
    b = _login(2, T0 + timedelta(seconds=30), user=None, actor=None)
    assert len(debounce_logins([a, b])) == 1


def test_custom_window() -> None:
    first = _login(1, T0)
    second = _login(2, T0 + timedelta(seconds=90), previous=T0)
    assert len(debounce_logins([first, second], window=timedelta(seconds=60))) == 2


def test_empty_input() -> None:
    assert debounce_logins([]) == []
