"""Tests for join-row id -> display name resolution."""

import logging

import pytest

from member_audit.application.services.relationship_resolver import (
    USER_ROLE_ENTITY_TYPE,
    RelationshipResolver,
)


class StubLookup:
    """In-memory IDisplayNameLookup."""

    def __init__(self, names: dict[tuple[str, str], str], fail_on: str | None = None) -> None:
        self.names = names
        self.fail_on = fail_on
        self.calls: list[tuple[str, str]] = []

    def display_name(self, kind: str, entity_id: str) -> str | None:
        self.calls.append((kind, entity_id))
        if entity_id == self.fail_on:
            raise RuntimeError("lookup unavailable")
        return self.names.get((kind, entity_id))


def test_resolves_user_and_role_names() -> None:
    lookup = StubLookup({("user", "u-1"): "jdoe", ("role", "r-1"): "Admin"})
    resolver = RelationshipResolver(lookup)
    assert resolver.resolve_display_pair(USER_ROLE_ENTITY_TYPE, "u-1", "r-1") == ("jdoe", "Admin")
    assert lookup.calls == [("user", "u-1"), ("role", "r-1")]


def test_missing_name_falls_back_to_raw_id(caplog: pytest.LogCaptureFixture) -> None:
    resolver = RelationshipResolver(StubLookup({("user", "u-1"): "jdoe"}))
    with caplog.at_level(logging.WARNING):
        pair = resolver.resolve_display_pair(USER_ROLE_ENTITY_TYPE, "u-1", "r-404")
    assert pair == ("jdoe", "r-404")
    assert "r-404" in caplog.text


def test_lookup_error_degrades_instead_of_raising() -> None:
    lookup = StubLookup({("role", "r-1"): "Admin"}, fail_on="u-1")
    resolver = RelationshipResolver(lookup)
    assert resolver.resolve_display_pair(USER_ROLE_ENTITY_TYPE, "u-1", "r-1") == ("u-1", "Admin")


def test_unknown_join_type_keeps_raw_ids() -> None:
    lookup = StubLookup({})
    resolver = RelationshipResolver(lookup)
    assert resolver.resolve_display_pair("MemberInstrument", "m-1", "i-1") == ("m-1", "i-1")
    assert lookup.calls == []


def test_custom_join_kinds() -> None:
    lookup = StubLookup({("member", "7"): "Rita", ("instrument", "3"): "Guitar"})
    resolver = RelationshipResolver(lookup, {"MemberInstrument": ("member", "instrument")})
    assert resolver.resolve_display_pair("MemberInstrument", "7", "3") == ("Rita", "Guitar")
