"""Hiring decision endpoints, nested under a candidate."""

from fastapi import APIRouter, Depends, Path, status

from api.dependencies import get_audit, get_store, require_actor
from api.schemas.decisions import DecisionCreate, DecisionResponse
from api.services import decisions as decision_service
from api.services.audit import AuditRecorder
from core.security import Actor
from database.store import EntityStore

router = APIRouter()


@router.post(
    "/{candidate_id}/decisions",
    response_model=DecisionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record Decision",
    description="HIRE moves an interviewed candidate to OFFERED, NO_HIRE to NOT_HIRED. HR/Admin only.",
)
async def record_decision(
    request: DecisionCreate,
    candidate_id: str = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await decision_service.record_decision(
        store, audit, candidate_id, request.decision, request.notes, actor
    )


@router.get(
    "/{candidate_id}/decisions",
    response_model=list[DecisionResponse],
    summary="List Decisions",
)
async def list_decisions(
    candidate_id: str = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await decision_service.list_decisions(store, candidate_id, actor)
