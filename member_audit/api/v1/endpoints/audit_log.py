"""Audit log API: who changed what, when; timeline view; administrative purge.

Reporting routes never fail on odd paging or date ranges: they return an
empty page instead.
"""

from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from member_audit.api.v1.dependencies import (
    get_audit_filter,
    get_audit_log_repo,
    get_audit_log_repo_transactional,
)
from member_audit.application.dtos.audit_log import AuditLogFilter
from member_audit.application.services.audit_display import debounce_logins
from member_audit.core.config import get_settings
from member_audit.domain.exceptions import ResourceNotFoundException
from member_audit.infrastructure.persistence.repositories.audit_log_repo import (
    AuditLogRepository,
)
from member_audit.schemas.audit_log import (
    AuditLogCountResponse,
    AuditLogEntryResponse,
    AuditLogListResponse,
    AuditLogPurgeResponse,
    TimelineEntryResponse,
    TimelineResponse,
)

router = APIRouter()


def _page_size(page_size: int | None) -> int:
    return page_size if page_size is not None else get_settings().audit_default_page_size


@router.get("", response_model=AuditLogListResponse)
async def list_audit_log(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    audit_filter: Annotated[AuditLogFilter, Depends(get_audit_filter)],
    page: int = Query(1, description="1-based page number"),
    page_size: int | None = Query(None, description="Entries per page (clamped)"),
):
    """List audit log entries (newest first, paginated, optional filters)."""
    size = _page_size(page_size)
    items = await audit_repo.list(audit_filter, page=page, page_size=size)
    total = await audit_repo.count(audit_filter)
    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(e) for e in items],
        page=page,
        page_size=size,
        total=total,
    )


@router.get("/count", response_model=AuditLogCountResponse)
async def count_audit_log(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    audit_filter: Annotated[AuditLogFilter, Depends(get_audit_filter)],
):
    return AuditLogCountResponse(total=await audit_repo.count(audit_filter))


@router.get("/export", response_model=list[AuditLogEntryResponse])
async def export_audit_log(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    audit_filter: Annotated[AuditLogFilter, Depends(get_audit_filter)],
):
    """Every matching entry, unpaginated."""
    items = await audit_repo.export(audit_filter)
    return [AuditLogEntryResponse.model_validate(e) for e in items]


@router.get("/timeline", response_model=TimelineResponse)
async def audit_timeline(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    audit_filter: Annotated[AuditLogFilter, Depends(get_audit_filter)],
    page: int = Query(1, description="1-based page number"),
    page_size: int | None = Query(None, description="Entries per page (clamped)"),
):
    """One page of entries with login signals relabeled and debounced."""
    size = _page_size(page_size)
    items = await audit_repo.list(audit_filter, page=page, page_size=size)
    window = timedelta(seconds=get_settings().audit_login_debounce_seconds)
    return TimelineResponse(
        items=[
            TimelineEntryResponse.model_validate(d)
            for d in debounce_logins(items, window=window)
        ],
        page=page,
        page_size=size,
    )


@router.get("/search", response_model=list[AuditLogEntryResponse])
async def search_audit_log(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    q: str = Query("", description="Text to find in the recorded changes"),
    page: int = Query(1, description="1-based page number"),
    page_size: int | None = Query(None, description="Entries per page (clamped)"),
):
    items = await audit_repo.search_changes(q, page=page, page_size=_page_size(page_size))
    return [AuditLogEntryResponse.model_validate(e) for e in items]


@router.get("/entity-types", response_model=list[str])
async def list_entity_types(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
):
    return await audit_repo.distinct_entity_types()


@router.get("/actions", response_model=list[str])
async def list_actions(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
):
    return await audit_repo.distinct_actions()


@router.get("/actors", response_model=list[str])
async def list_actors(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
):
    return await audit_repo.distinct_actor_names()


@router.get("/entities/{entity_type}/{entity_id}", response_model=list[AuditLogEntryResponse])
async def entity_history(
    entity_type: str,
    entity_id: int,
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
):
    """Full history of one entity (newest first)."""
    items = await audit_repo.entity_history(entity_type, entity_id)
    return [AuditLogEntryResponse.model_validate(e) for e in items]


@router.delete("/{entry_id}", response_model=AuditLogPurgeResponse)
async def delete_audit_entry(
    entry_id: int,
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo_transactional)],
):
    """Purge one entry; 404 when it does not exist."""
    if not await audit_repo.delete(entry_id):
        raise ResourceNotFoundException("audit_log", str(entry_id))
    return AuditLogPurgeResponse(deleted=1)


@router.delete("", response_model=AuditLogPurgeResponse)
async def truncate_audit_log(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo_transactional)],
    actor_name: str | None = Query(None, description="Only purge this actor's entries"),
):
    """Purge the whole audit log, or one actor's entries when actor_name is given."""
    if actor_name is not None:
        return AuditLogPurgeResponse(deleted=await audit_repo.truncate_by_actor(actor_name))
    return AuditLogPurgeResponse(deleted=await audit_repo.truncate())
