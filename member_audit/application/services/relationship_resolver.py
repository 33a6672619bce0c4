"""Relationship entity resolver: join-row foreign keys -> display names.

Resolution must happen while the referenced rows are still reachable
(i.e. during the save, before the unit of work detaches them). A failed or
empty lookup degrades to the raw id; it never fails the save.
"""

from __future__ import annotations

from member_audit.application.interfaces.repositories import IDisplayNameLookup
from member_audit.shared.telemetry.logging import get_logger

_logger = get_logger(__name__)

USER_ROLE_ENTITY_TYPE = "UserRole"

# join entity type -> (left kind, right kind)
JOIN_KINDS: dict[str, tuple[str, str]] = {
    USER_ROLE_ENTITY_TYPE: ("user", "role"),
}


class RelationshipResolver:
    """Resolves (left_id, right_id) of a join row into (left_name, right_name)."""

    def __init__(
        self,
        lookup: IDisplayNameLookup,
        join_kinds: dict[str, tuple[str, str]] | None = None,
    ) -> None:
        self._lookup = lookup
        self._join_kinds = join_kinds or JOIN_KINDS

    def resolve_display_pair(
        self, join_entity_type: str, left_id: str, right_id: str
    ) -> tuple[str, str]:
        try:
            left_kind, right_kind = self._join_kinds[join_entity_type]
        except KeyError:
            _logger.warning(
                "No relationship mapping for %s; keeping raw ids", join_entity_type
            )
            return (str(left_id), str(right_id))
        return (
            self._resolve(left_kind, left_id),
            self._resolve(right_kind, right_id),
        )

    def _resolve(self, kind: str, entity_id: str) -> str:
        try:
            name = self._lookup.display_name(kind, entity_id)
        except Exception as e:
            _logger.warning(
                "Display name lookup failed for %s %s: %s", kind, entity_id, str(e),
                exc_info=True,
            )
            name = None
        if not name:
            _logger.warning("Falling back to raw id for %s %s", kind, entity_id)
            return str(entity_id)
        return name
