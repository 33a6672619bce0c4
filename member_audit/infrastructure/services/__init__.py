"""Infrastructure services backed by the ORM session."""

from member_audit.infrastructure.services.display_name_lookup import (
    SessionDisplayNameLookup,
    entity_display_name,
)

__all__ = ["SessionDisplayNameLookup", "entity_display_name"]
