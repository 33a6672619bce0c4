"""Core: configuration, lifespan, and exception handlers."""

from member_audit.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
