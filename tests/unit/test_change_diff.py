"""Tests for the change diff engine (semantic equality, classification, login rule)."""

from datetime import UTC, date, datetime, timedelta

import pytest

from member_audit.application.services.change_diff import (
    ChangeDiffEngine,
    describe_binary,
    is_login_advance,
    render_value,
    values_equal,
)

T0 = datetime(2025, 1, 10, 8, 0, tzinfo=UTC)


def _change(result, field_name):
    return next((c for c in result.changes if c.field_name == field_name), None)


@pytest.fixture
def engine() -> ChangeDiffEngine:
    return ChangeDiffEngine()


class TestValuesEqual:
    @pytest.mark.parametrize(
        ("old", "new"),
        [
            (None, "[]"),
            ("[]", "[]"),
            ("", "[]"),
            (None, ""),
            ("", None),
            (None, "{}"),
            ("[1, 2]", "[1,2]"),
            ('{"a": 1, "b": 2}', '{"b":2,"a":1}'),
            (T0, T0.replace(tzinfo=None)),
            (b"abc", bytearray(b"abc")),
            (3, 3),
        ],
    )
    def test_semantically_equal(self, old, new) -> None:
        assert values_equal(old, new)

    @pytest.mark.parametrize(
        ("old", "new"),
        [
            ("[]", "[1,2]"),
            (None, "[1]"),
            ("Blue", "Red"),
            (None, "x"),
            (None, 0),
            (T0, T0 + timedelta(seconds=1)),
            ("[not json", "[not json either"),
        ],
    )
    def test_real_changes(self, old, new) -> None:
        assert not values_equal(old, new)


def test_login_advance() -> None:
    assert is_login_advance(None, T0)
    assert is_login_advance(T0, T0 + timedelta(minutes=1))
    assert not is_login_advance(T0, T0)
    assert not is_login_advance(T0, T0 - timedelta(minutes=1))
    assert not is_login_advance(T0, None)


def test_render_value() -> None:
    assert render_value("x", None) is None
    assert render_value("x", True) == "true"
    assert render_value("x", date(2000, 5, 17)) == "2000-05-17"
    assert render_value("x", T0) == "2025-01-10T08:00:00+00:00"
    assert render_value("x", 1999) == "1999"
    assert render_value("profile_picture_data", b"\x00" * 2048) == "[Picture uploaded: 2 KB]"


def test_describe_binary_labels_by_field_name() -> None:
    assert describe_binary("cover_image", 10) == "[Image uploaded: 10 bytes]"
    assert describe_binary("document_file", 3 * 1024 * 1024) == "[File uploaded: 3 MB]"
    assert describe_binary("blob", 1024) == "[Binary data: 1 KB]"


class TestDiffModified:
    def test_json_list_noise_is_dropped_but_real_change_kept(self, engine) -> None:
        """null -> "[]" is not reported even when another field genuinely changed."""
        result = engine.diff_modified(
            "ApplicationUser",
            [("categories_json", None, "[]"), ("first_name", "Ana", "Anna")],
        )
        assert result is not None
        assert [c.field_name for c in result.changes] == ["first_name"]
        assert not result.is_critical

    def test_only_equal_values_yields_none(self, engine) -> None:
        assert engine.diff_modified("Event", [("tags_json", "[]", "[]")]) is None

    def test_critical_field_is_shown_and_flags(self, engine) -> None:
        result = engine.diff_modified("ApplicationUser", [("email", "a@x.io", "b@x.io")])
        assert result is not None
        assert result.is_critical
        change = _change(result, "email")
        assert change is not None
        assert (change.old_value, change.new_value) == ("a@x.io", "b@x.io")

    def test_excluded_field_flags_but_is_hidden(self, engine) -> None:
        result = engine.diff_modified(
            "ApplicationUser",
            [("password_hash", "old-hash", "new-hash"), ("degree", None, "MSc")],
        )
        assert result is not None
        assert result.is_critical
        assert _change(result, "password_hash") is None
        assert [c.field_name for c in result.changes] == ["degree"]

    def test_excluded_only_change_is_critical_with_no_changes(self, engine) -> None:
        result = engine.diff_modified("ApplicationUser", [("security_stamp", "s1", "s2")])
        assert result is not None
        assert result.is_critical
        assert result.changes == ()

    def test_ignored_fields_never_count(self, engine) -> None:
        assert (
            engine.diff_modified(
                "ApplicationUser", [("concurrency_stamp", "c1", "c2"), ("updated_at", None, T0)]
            )
            is None
        )

    def test_profile_fields_are_not_critical(self, engine) -> None:
        result = engine.diff_modified(
            "ApplicationUser",
            [
                ("first_name", "Ana", "Anna"),
                ("date_of_birth", date(2000, 1, 1), date(2000, 1, 2)),
                ("degree", "BSc", "MSc"),
            ],
        )
        assert result is not None
        assert not result.is_critical
        assert len(result.changes) == 3

    def test_first_login_is_recorded(self, engine) -> None:
        result = engine.diff_modified("ApplicationUser", [("last_login_date", None, T0)])
        assert result is not None
        change = _change(result, "last_login_date")
        assert change is not None
        assert change.old_value is None
        assert change.new_value == T0.isoformat()

    def test_login_moving_back_is_not_audited(self, engine) -> None:
        earlier = T0 - timedelta(hours=1)
        assert engine.diff_modified("ApplicationUser", [("last_login_date", T0, earlier)]) is None

    def test_login_back_with_ignored_noise_is_still_not_audited(self, engine) -> None:
        earlier = T0 - timedelta(hours=1)
        assert (
            engine.diff_modified(
                "ApplicationUser",
                [("last_login_date", T0, earlier), ("concurrency_stamp", "a", "b")],
            )
            is None
        )

    def test_login_back_alongside_real_change_is_kept(self, engine) -> None:
        """The login rule only applies when the login date is the sole change."""
        earlier = T0 - timedelta(hours=1)
        result = engine.diff_modified(
            "ApplicationUser",
            [("last_login_date", T0, earlier), ("first_name", "Ana", "Anna")],
        )
        assert result is not None
        assert {c.field_name for c in result.changes} == {"last_login_date", "first_name"}


class TestDiffCreated:
    def test_initial_values_as_new(self, engine) -> None:
        result = engine.diff_created(
            "Album",
            [("id", 1), ("title", "Blue"), ("description", ""), ("year", None), ("created_by", "x")],
        )
        assert [(c.field_name, c.old_value, c.new_value) for c in result.changes] == [
            ("title", None, "Blue")
        ]
        assert not result.is_critical

    def test_user_creation_hides_secrets_and_is_critical(self, engine) -> None:
        result = engine.diff_created(
            "ApplicationUser",
            [("user_name", "jdoe"), ("password_hash", "h"), ("categories_json", "[]")],
        )
        assert result.is_critical
        assert [c.field_name for c in result.changes] == ["user_name"]


class TestDiffDeleted:
    def test_always_critical_with_marker_and_context(self, engine) -> None:
        result = engine.diff_deleted(
            "Album",
            [("id", 4), ("title", "Blue"), ("cover_image", b"img"), ("year", None)],
        )
        assert result.is_critical
        assert result.deleted
        assert [(c.field_name, c.old_value, c.new_value) for c in result.changes] == [
            ("title", "Blue", None)
        ]

    def test_excluded_values_are_not_kept(self, engine) -> None:
        result = engine.diff_deleted(
            "ApplicationUser", [("user_name", "jdoe"), ("password_hash", "h")]
        )
        assert _change(result, "password_hash") is None
        assert _change(result, "user_name") is not None

    def test_unregistered_type_with_no_values_is_still_critical(self, engine) -> None:
        result = engine.diff_deleted("Anything", [])
        assert result.is_critical
        assert result.deleted
        assert result.changes == ()
