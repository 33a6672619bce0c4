"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "member-audit"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database: any SQLAlchemy async URL (postgresql+asyncpg://, sqlite+aiosqlite://)
    database_url: str = "sqlite+aiosqlite:///./member_audit.db"
    database_echo: bool = False
    database_create_all: bool = True

    # CORS (comma-separated origins)
    allowed_origins: str = "http://localhost:3000"

    # Auditing
    audit_enabled: bool = True
    audit_login_debounce_seconds: int = 120
    audit_default_page_size: int = 100
    audit_max_page_size: int = 500

    # Actor attribution. Headers are only honoured behind a trusted gateway.
    actor_name_header: str = "X-Actor-Name"
    actor_id_header: str = "X-Actor-Id"
    trust_actor_headers: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_audit_limits(self) -> "Settings":
        """Validate debounce window and pagination bounds."""
        if not self.database_url:
            raise ValueError("DATABASE_URL is required. Set in environment or .env file.")
        if self.audit_login_debounce_seconds < 0:
            raise ValueError(
                "audit_login_debounce_seconds must be >= 0, "
                f"got: {self.audit_login_debounce_seconds}"
            )
        if not 1 <= self.audit_default_page_size <= self.audit_max_page_size:
            raise ValueError(
                "audit_default_page_size must be between 1 and audit_max_page_size "
                f"({self.audit_default_page_size} / {self.audit_max_page_size})"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
