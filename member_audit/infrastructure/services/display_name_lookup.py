"""Display-name lookups against the ORM session (implements IDisplayNameLookup).

Runs inside a flush, on the sync Session: the identity map and rows pending
in the same unit of work are consulted before the database, and the database
read is done with autoflush disabled so it cannot re-enter the flush.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from member_audit.infrastructure.persistence.models.identity import ApplicationUser, Role

# kind -> (model, attribute holding the display name)
DISPLAY_SOURCES: dict[str, tuple[type[Any], str]] = {
    "user": (ApplicationUser, "user_name"),
    "role": (Role, "name"),
}

DISPLAY_ATTRIBUTES: tuple[str, ...] = ("title", "name", "user_name", "content")


def entity_display_name(
    entity: Any, attributes: tuple[str, ...] = DISPLAY_ATTRIBUTES
) -> str | None:
    """First non-empty display attribute of an entity, or None."""
    for attribute in attributes:
        value = getattr(entity, attribute, None)
        if isinstance(value, str) and value.strip():
            return value
    return None


class SessionDisplayNameLookup:
    """Resolves user/role ids to user names / role names through one session."""

    def __init__(
        self,
        session: Session,
        sources: dict[str, tuple[type[Any], str]] | None = None,
    ) -> None:
        self.session = session
        self._sources = sources or DISPLAY_SOURCES

    def display_name(self, kind: str, entity_id: str) -> str | None:
        source = self._sources.get(kind)
        if source is None:
            return None
        model, attribute = source

        instance = self._find_pending(model, entity_id)
        if instance is None:
            with self.session.no_autoflush:
                instance = self.session.get(model, entity_id)
        if instance is None:
            return None
        return getattr(instance, attribute, None)

    def _find_pending(self, model: type[Any], entity_id: str) -> Any | None:
        # Rows added in this unit of work have no identity key yet.
        for obj in self.session.new:
            if isinstance(obj, model) and getattr(obj, "id", None) == entity_id:
                return obj
        return None
