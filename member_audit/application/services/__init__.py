"""Application services: pure auditing logic (no ORM, no I/O)."""

from member_audit.application.services.audit_display import (
    DEFAULT_LOGIN_DEBOUNCE_WINDOW,
    LOGGED_IN_ACTION,
    PROFILE_UPDATED_ACTION,
    debounce_logins,
    describe_entry,
    is_login_signal,
)
from member_audit.application.services.audit_record_builder import AuditRecordBuilder
from member_audit.application.services.change_diff import (
    ChangeDiffEngine,
    is_login_advance,
    render_value,
    values_equal,
)
from member_audit.application.services.field_classification import (
    FieldClassificationRegistry,
    build_default_registry,
    default_registry,
)
from member_audit.application.services.relationship_resolver import RelationshipResolver

__all__ = [
    "DEFAULT_LOGIN_DEBOUNCE_WINDOW",
    "LOGGED_IN_ACTION",
    "PROFILE_UPDATED_ACTION",
    "AuditRecordBuilder",
    "ChangeDiffEngine",
    "FieldClassificationRegistry",
    "RelationshipResolver",
    "build_default_registry",
    "debounce_logins",
    "default_registry",
    "describe_entry",
    "is_login_advance",
    "is_login_signal",
    "render_value",
    "values_equal",
]
