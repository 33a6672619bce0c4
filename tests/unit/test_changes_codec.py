"""Tests for the stored changes payload."""

import json

from member_audit.application.dtos.audit_log import FieldChange
from member_audit.infrastructure.persistence.changes_codec import (
    DELETED_MARKER_KEY,
    decode_changes,
    encode_changes,
)


def test_nothing_to_show_is_null() -> None:
    assert encode_changes(()) is None


def test_stored_shape_uses_old_new_pairs() -> None:
    text = encode_changes([FieldChange("title", "Blue", "Red")])
    assert text is not None
    assert json.loads(text) == {"title": {"Old": "Blue", "New": "Red"}}


def test_deleted_marker_is_stored_and_read_back() -> None:
    text = encode_changes([FieldChange("title", "Blue", None)], deleted=True)
    assert text is not None
    assert json.loads(text)[DELETED_MARKER_KEY] is True
    changes, deleted = decode_changes(text)
    assert deleted
    assert changes == (FieldChange("title", "Blue", None),)


def test_decode_tolerates_bad_payloads() -> None:
    assert decode_changes(None) == ((), False)
    assert decode_changes("not json") == ((), False)
    assert decode_changes("[1, 2]") == ((), False)


def test_decode_stringifies_non_text_values() -> None:
    changes, _ = decode_changes('{"year": {"Old": 1999, "New": 2001}}')
    assert changes == (FieldChange("year", "1999", "2001"),)
