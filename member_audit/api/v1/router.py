"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from member_audit.api.v1.dependencies (no manual repo construction).
"""

from fastapi import APIRouter

from member_audit.api.v1.endpoints import audit_log, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(audit_log.router, prefix="/audit-log", tags=["audit-log"])
