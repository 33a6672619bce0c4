"""Domain exceptions for the auditing engine.

Presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class MemberAuditException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the API exception handler."""
        return {"error": self.error_code, "message": self.message, "details": self.details}


class ValidationException(MemberAuditException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(MemberAuditException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'audit_log').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class AuditLogImmutableException(MemberAuditException):
    """Raised when something tries to update a persisted audit log row."""

    def __init__(self, entry_id: int | None = None) -> None:
        super().__init__(
            "Audit log entries are immutable and cannot be updated.",
            "AUDIT_LOG_IMMUTABLE",
            {"entry_id": entry_id} if entry_id is not None else {},
        )


class AuditCaptureException(MemberAuditException):
    """Raised when an audit row cannot be built for a pending change.

    Propagates out of the flush so the business write rolls back with it.
    """

    def __init__(self, entity_type: str, reason: str) -> None:
        super().__init__(
            f"Could not capture audit trail for {entity_type}: {reason}",
            "AUDIT_CAPTURE_ERROR",
            {"entity_type": entity_type, "reason": reason},
        )
