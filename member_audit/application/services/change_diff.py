"""Change diff engine: original vs current values -> classified FieldChange set.

Pure functions over plain values; the ORM-specific extraction happens in the
save interceptor. Semantic equality treats every "no items" encoding of a
JSON-list field (None, "", "[]", and "{}" for objects) as the same state, and
two JSON documents as equal when they decode to equal values.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from member_audit.application.dtos.audit_log import DiffResult, FieldChange
from member_audit.application.services.field_classification import (
    LAST_LOGIN_FIELD,
    FieldClassificationRegistry,
    default_registry,
)
from member_audit.shared.enums import FieldClassification
from member_audit.shared.utils.datetime import ensure_utc

_BINARY_TYPES = (bytes, bytearray, memoryview)


def _looks_like_json_document(text: str) -> bool:
    stripped = text.lstrip()
    return stripped.startswith("[") or stripped.startswith("{")


def _is_empty_json_collection(value: Any) -> bool:
    return isinstance(value, (list, dict)) and len(value) == 0


def _strings_equal(old: str | None, new: str | None) -> bool:
    old_text = old or ""
    new_text = new or ""
    if old_text == new_text:
        return True
    try:
        old_blank = not old_text.strip()
        new_blank = not new_text.strip()
        if old_blank or new_blank:
            other = new_text if old_blank else old_text
            if _looks_like_json_document(other):
                return _is_empty_json_collection(json.loads(other))
            return False
        if _looks_like_json_document(old_text) and _looks_like_json_document(new_text):
            old_doc = json.loads(old_text)
            new_doc = json.loads(new_text)
            if _is_empty_json_collection(old_doc) and _is_empty_json_collection(new_doc):
                return True
            return old_doc == new_doc
    except ValueError:
        # Not JSON; plain strings already compared unequal.
        return False
    return False


def values_equal(old: Any, new: Any) -> bool:
    """Return True when old and new mean the same thing for audit purposes."""
    if old is new:
        return True
    old_is_text = isinstance(old, str)
    new_is_text = isinstance(new, str)
    if (old_is_text or old is None) and (new_is_text or new is None):
        return _strings_equal(old, new)
    if old is None or new is None:
        return False
    if isinstance(old, datetime) and isinstance(new, datetime):
        return ensure_utc(old) == ensure_utc(new)
    if isinstance(old, _BINARY_TYPES) and isinstance(new, _BINARY_TYPES):
        return bytes(old) == bytes(new)
    return old == new


def is_login_advance(old: datetime | None, new: datetime | None) -> bool:
    """True when a last-login timestamp moved forward (or was set for the first time)."""
    if new is None:
        return False
    if old is None:
        return True
    return ensure_utc(new) > ensure_utc(old)


def _format_bytes(count: int) -> str:
    if count < 1024:
        return f"{count} bytes"
    if count < 1024 * 1024:
        return f"{count // 1024} KB"
    return f"{count // (1024 * 1024)} MB"


def describe_binary(field_name: str, size: int) -> str:
    """Human description used in place of binary payloads."""
    name = field_name.lower()
    if any(word in name for word in ("picture", "photo", "avatar")):
        label = "Picture uploaded"
    elif "image" in name:
        label = "Image uploaded"
    elif any(word in name for word in ("file", "document", "pdf")):
        label = "File uploaded"
    else:
        label = "Binary data"
    return f"[{label}: {_format_bytes(size)}]"


def render_value(field_name: str, value: Any) -> str | None:
    """Render a field value as the text stored on the audit trail."""
    if value is None:
        return None
    if isinstance(value, _BINARY_TYPES):
        size = len(bytes(value))
        return describe_binary(field_name, size) if size else None
    if isinstance(value, datetime):
        return ensure_utc(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


class ChangeDiffEngine:
    """Builds DiffResults for created, modified, and deleted entities."""

    def __init__(self, registry: FieldClassificationRegistry | None = None) -> None:
        self.registry = registry or default_registry

    def diff_modified(
        self, entity_type: str, properties: Iterable[tuple[str, Any, Any]]
    ) -> DiffResult | None:
        """Diff (field_name, old, new) triples reported as modified.

        Returns None when nothing worth an audit entry changed: every pair was
        semantically equal or ignored, or the only change is a last-login
        timestamp that did not move forward.
        """
        meaningful: list[tuple[str, Any, Any, FieldClassification]] = []
        for field_name, old, new in properties:
            classification = self.registry.classify(entity_type, field_name)
            if classification is FieldClassification.IGNORED:
                continue
            if values_equal(old, new):
                continue
            meaningful.append((field_name, old, new, classification))

        if not meaningful:
            return None
        if len(meaningful) == 1 and meaningful[0][0] == LAST_LOGIN_FIELD:
            _, old, new, _ = meaningful[0]
            if not is_login_advance(old, new):
                return None

        is_critical = False
        changes: list[FieldChange] = []
        for field_name, old, new, classification in meaningful:
            if classification is FieldClassification.EXCLUDED:
                is_critical = True
                continue
            if classification is FieldClassification.CRITICAL:
                is_critical = True
            changes.append(
                FieldChange(
                    field_name,
                    render_value(field_name, old),
                    render_value(field_name, new),
                )
            )
        return DiffResult(changes=tuple(changes), is_critical=is_critical)

    def diff_created(
        self, entity_type: str, values: Iterable[tuple[str, Any]]
    ) -> DiffResult:
        """Initial values of a new entity as {Old: None, New: value} pairs."""
        is_critical = False
        changes: list[FieldChange] = []
        for field_name, value in values:
            classification = self.registry.classify(entity_type, field_name)
            if classification is FieldClassification.IGNORED or values_equal(None, value):
                continue
            if classification is FieldClassification.EXCLUDED:
                is_critical = True
                continue
            if classification is FieldClassification.CRITICAL:
                is_critical = True
            rendered = render_value(field_name, value)
            if rendered is None:
                continue
            changes.append(FieldChange(field_name, None, rendered))
        return DiffResult(changes=tuple(changes), is_critical=is_critical)

    def diff_deleted(
        self, entity_type: str, values: Iterable[tuple[str, Any]]
    ) -> DiffResult:
        """Delete marker plus last known values for context. Always critical."""
        changes: list[FieldChange] = []
        for field_name, value in values:
            classification = self.registry.classify(entity_type, field_name)
            if classification in (FieldClassification.IGNORED, FieldClassification.EXCLUDED):
                continue
            if isinstance(value, _BINARY_TYPES) or values_equal(value, None):
                continue
            changes.append(FieldChange(field_name, render_value(field_name, value), None))
        return DiffResult(changes=tuple(changes), is_critical=True, deleted=True)
