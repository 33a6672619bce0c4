"""Health check endpoint. No dependencies; used for liveness probes."""

from fastapi import APIRouter

from member_audit.core.config import get_settings
from member_audit.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(audit_enabled=get_settings().audit_enabled)
