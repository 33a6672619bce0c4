"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring: logging, schema creation, save
interceptor installation, DB engine dispose. No business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from member_audit.core.config import get_settings
from member_audit.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, tables (if database_create_all), audit hooks
    (if audit_enabled). Shutdown order: audit hooks removed, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    setup_logging()

    from member_audit.infrastructure.persistence import database
    from member_audit.infrastructure.persistence.audit_interceptor import (
        install_audit_hooks,
        uninstall_audit_hooks,
    )

    if settings.database_create_all:
        await database.create_all()
        logger.info("Database tables ensured")

    if settings.audit_enabled:
        install_audit_hooks()
    else:
        logger.warning("Auditing disabled; writes will not be recorded")

    yield

    # ---- Shutdown ----
    if settings.audit_enabled:
        uninstall_audit_hooks()

    if getattr(database, "engine", None) is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
