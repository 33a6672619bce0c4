"""Field classification registry: which fields are shown, flagged, or hidden.

Explicit per-entity-type tables built in code. Entity types that are not
registered default every field to NORMAL, except the bookkeeping fields
every entity shares, which are IGNORED everywhere. Deletions are critical
structurally and are not governed here.
"""

from collections.abc import Iterable

from member_audit.shared.enums import FieldClassification

# Written by the save interceptor itself; never a change of substance.
BOOKKEEPING_FIELDS: frozenset[str] = frozenset(
    {"id", "created_at", "created_by", "updated_at", "updated_by"}
)

USER_ENTITY_TYPE = "ApplicationUser"
LAST_LOGIN_FIELD = "last_login_date"


class FieldClassificationRegistry:
    """Lookup keyed by (entity_type, field_name)."""

    def __init__(self, ignored_everywhere: Iterable[str] = BOOKKEEPING_FIELDS) -> None:
        self._ignored_everywhere = frozenset(ignored_everywhere)
        self._rules: dict[str, dict[str, FieldClassification]] = {}

    def register(
        self,
        entity_type: str,
        *,
        critical: Iterable[str] = (),
        excluded: Iterable[str] = (),
        ignored: Iterable[str] = (),
    ) -> None:
        """Add or extend the rules for one entity type.

        A field listed under more than one heading keeps the strongest
        classification: excluded > critical > ignored.
        """
        rules = self._rules.setdefault(entity_type, {})
        for name in ignored:
            rules[name] = FieldClassification.IGNORED
        for name in critical:
            rules[name] = FieldClassification.CRITICAL
        for name in excluded:
            rules[name] = FieldClassification.EXCLUDED

    def classify(self, entity_type: str, field_name: str) -> FieldClassification:
        rules = self._rules.get(entity_type)
        if rules is not None and field_name in rules:
            return rules[field_name]
        if field_name in self._ignored_everywhere:
            return FieldClassification.IGNORED
        return FieldClassification.NORMAL


def build_default_registry() -> FieldClassificationRegistry:
    """Registry for the membership application's entities."""
    registry = FieldClassificationRegistry()
    registry.register(
        USER_ENTITY_TYPE,
        critical=("email", "user_name", "phone_number"),
        excluded=("password_hash", "security_stamp"),
        ignored=(
            "concurrency_stamp",
            "normalized_user_name",
            "normalized_email",
            "lockout_end",
            "access_failed_count",
            "two_factor_enabled",
            "phone_number_confirmed",
            "email_confirmed",
            "lockout_enabled",
        ),
    )
    registry.register("Role", ignored=("normalized_name", "concurrency_stamp"))
    return registry


default_registry = build_default_registry()
