"""Dashboard statistics and audit trail endpoints."""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_store, require_actor
from api.schemas.statistics import AuditLogResponse, StatisticsResponse
from api.services import audit as audit_service
from api.services import statistics as statistics_service
from core.security import Actor
from database.store import EntityStore

router = APIRouter()


@router.get(
    "/statistics",
    response_model=StatisticsResponse,
    summary="Pipeline Statistics",
    description="Candidate, interview and new-employee counts for the HR dashboard.",
)
async def get_statistics(
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    stats = await statistics_service.get_statistics(store, actor)
    return StatisticsResponse(**asdict(stats))


@router.get(
    "/audit-logs",
    response_model=list[AuditLogResponse],
    summary="Audit Trail",
    description="Recorded actions, newest first. Admin only.",
)
async def list_audit_logs(
    target_type: Optional[str] = Query(None, description="Filter by target type, e.g. candidate"),
    target_id: Optional[str] = Query(None, description="Filter by target ID"),
    limit: int = Query(100, ge=1, le=500),
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await audit_service.list_audit_logs(
        store, actor, target_type=target_type, target_id=target_id, limit=limit
    )
