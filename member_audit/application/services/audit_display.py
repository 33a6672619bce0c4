"""Display debouncer: presents a noisy audit stream as a clean timeline.

Pure and stateless; reads a caller-supplied, time-ordered sequence (oldest
or newest first) and returns a new sequence. Never touches storage.

A user entry whose last-login timestamp moved forward is a login signal.
When that is the only visible field it is shown as "Logged in"; alongside
other fields it is shown as "Profile Updated" with a logged-in badge.
Repeated login signals for the same user within the debounce window are
collapsed into the earliest one.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import timedelta

from member_audit.application.dtos.audit_log import AuditLogResult, DisplayEntry
from member_audit.application.services.change_diff import is_login_advance
from member_audit.application.services.field_classification import (
    LAST_LOGIN_FIELD,
    USER_ENTITY_TYPE,
)
from member_audit.shared.enums import AuditAction
from member_audit.shared.utils.datetime import ensure_utc, parse_iso_utc

LOGGED_IN_ACTION = "Logged in"
PROFILE_UPDATED_ACTION = "Profile Updated"
DEFAULT_LOGIN_DEBOUNCE_WINDOW = timedelta(minutes=2)
UNKNOWN_ACTOR = "Unknown"


def is_login_signal(entry: AuditLogResult) -> bool:
    """True for a Modified user entry whose last-login timestamp advanced."""
    if entry.entity_type != USER_ENTITY_TYPE or entry.action != AuditAction.MODIFIED.value:
        return False
    change = entry.get_change(LAST_LOGIN_FIELD)
    if change is None:
        return False
    return is_login_advance(parse_iso_utc(change.old_value), parse_iso_utc(change.new_value))


def describe_entry(entry: AuditLogResult) -> DisplayEntry:
    """Decide the label (and badge) for a single entry."""
    if not is_login_signal(entry):
        return DisplayEntry(entry=entry, display_action=entry.action)
    visible = [c.field_name for c in entry.changes if not c.field_name.startswith("_")]
    if visible == [LAST_LOGIN_FIELD]:
        return DisplayEntry(entry=entry, display_action=LOGGED_IN_ACTION)
    return DisplayEntry(
        entry=entry, display_action=PROFILE_UPDATED_ACTION, show_logged_in_badge=True
    )


def _is_login_display(item: DisplayEntry) -> bool:
    return item.display_action == LOGGED_IN_ACTION or item.show_logged_in_badge


def _debounce_key(entry: AuditLogResult) -> str:
    # The audited user is who logged in; fall back to whoever made the write.
    return entry.entity_display_name or entry.actor_name or UNKNOWN_ACTOR


def debounce_logins(
    entries: Sequence[AuditLogResult],
    window: timedelta = DEFAULT_LOGIN_DEBOUNCE_WINDOW,
) -> list[DisplayEntry]:
    """Label every entry and collapse repeated logins per user within window.

    Login signals at most `window` after the last kept login of the same user
    are dropped; the kept (earliest) entry records the dropped ids in
    `collapsed`. Non-login entries pass through with display_action = action
    and never merge with anything. Output keeps the input order.
    """
    described = [describe_entry(e) for e in entries]
    chronological = sorted(
        range(len(entries)), key=lambda i: (ensure_utc(entries[i].timestamp), i)
    )

    last_kept: dict[str, int] = {}
    dropped: set[int] = set()
    collapsed: dict[int, list[int]] = {}
    for index in chronological:
        item = described[index]
        if not _is_login_display(item):
            continue
        key = _debounce_key(item.entry)
        kept_index = last_kept.get(key)
        if kept_index is not None:
            kept_at = ensure_utc(entries[kept_index].timestamp)
            if ensure_utc(item.entry.timestamp) - kept_at <= window:
                dropped.add(index)
                collapsed.setdefault(kept_index, []).append(item.entry.id)
                continue
        last_kept[key] = index

    result: list[DisplayEntry] = []
    for index, item in enumerate(described):
        if index in dropped:
            continue
        if index in collapsed:
            item = replace(item, collapsed=tuple(collapsed[index]))
        result.append(item)
    return result
