"""FastAPI dependencies (composition root)."""

from member_audit.api.v1.dependencies.audit import (
    get_audit_filter,
    get_audit_log_repo,
    get_audit_log_repo_transactional,
)

__all__ = [
    "get_audit_filter",
    "get_audit_log_repo",
    "get_audit_log_repo_transactional",
]
