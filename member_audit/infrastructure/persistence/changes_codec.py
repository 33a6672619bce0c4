"""Serialization of structured changes at the persistence boundary.

Stored shape (audit_log.changes): a JSON object
    {"field_name": {"Old": <text|null>, "New": <text|null>}, ...}
with an optional "_Deleted": true marker for deletions. Null when there is
nothing to show.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from member_audit.application.dtos.audit_log import FieldChange
from member_audit.shared.telemetry.logging import get_logger

_logger = get_logger(__name__)

DELETED_MARKER_KEY = "_Deleted"


def encode_changes(changes: Iterable[FieldChange], deleted: bool = False) -> str | None:
    payload: dict[str, Any] = {}
    if deleted:
        payload[DELETED_MARKER_KEY] = True
    for change in changes:
        payload[change.field_name] = {"Old": change.old_value, "New": change.new_value}
    if not payload:
        return None
    return json.dumps(payload, ensure_ascii=False)


def decode_changes(text: str | None) -> tuple[tuple[FieldChange, ...], bool]:
    """Parse stored changes into (field changes, deleted marker).

    Malformed payloads decode to no changes; the row itself stays readable.
    """
    if not text:
        return (), False
    try:
        payload = json.loads(text)
    except ValueError:
        _logger.warning("Unreadable audit changes payload; showing none")
        return (), False
    if not isinstance(payload, dict):
        return (), False

    deleted = payload.get(DELETED_MARKER_KEY) is True
    changes: list[FieldChange] = []
    for field_name, pair in payload.items():
        if field_name.startswith("_") or not isinstance(pair, dict):
            continue
        old, new = pair.get("Old"), pair.get("New")
        changes.append(
            FieldChange(
                field_name,
                None if old is None else str(old),
                None if new is None else str(new),
            )
        )
    return tuple(changes), deleted
