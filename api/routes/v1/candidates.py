"""
Candidate endpoints.

Applications are submitted anonymously from the public form; everything else
is for HR/Admin (and, for reading, the candidate's assigned interviewers).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_actor, get_audit, get_store, require_actor
from api.schemas.candidates import (
    ApplicationCreate,
    CandidateDetailsResponse,
    CandidateResponse,
    StatusChangeRequest,
)
from api.services import candidates as candidate_service
from api.services.audit import AuditRecorder
from core.security import Actor
from database.store import EntityStore

router = APIRouter()


@router.post(
    "",
    response_model=CandidateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Application",
    description="Apply to an open position. No login required; one application per email and position.",
)
async def submit_application(
    request: ApplicationCreate,
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Optional[Actor] = Depends(get_actor),
):
    return await candidate_service.submit_application(
        store,
        audit,
        full_name=request.full_name,
        email=request.email,
        phone=request.phone,
        applied_position_id=request.applied_position_id,
        cv_url=request.cv_url,
        actor=actor,
    )


@router.get(
    "",
    response_model=list[CandidateResponse],
    summary="List Candidates",
    description="List candidates, newest first, optionally filtered by status and position.",
)
async def list_candidates(
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    position_id: Optional[str] = Query(None, description="Filter by position"),
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await candidate_service.list_candidates(
        store, actor, status=status_filter, position_id=position_id
    )


@router.get(
    "/{candidate_id}",
    response_model=CandidateDetailsResponse,
    summary="Get Candidate Details",
    description="A candidate with position, interview sessions, interviews and decisions.",
)
async def get_candidate_details(
    candidate_id: str = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    details = await candidate_service.get_candidate_details(store, candidate_id, actor)
    return CandidateDetailsResponse.from_details(details)


@router.post(
    "/{candidate_id}/status",
    response_model=CandidateResponse,
    summary="Change Candidate Status",
    description=(
        "Move a candidate along the hiring pipeline (approve, reject, confirm hire). "
        "Offer and not-hired outcomes of an interview go through decisions."
    ),
)
async def transition_candidate(
    request: StatusChangeRequest,
    candidate_id: str = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await candidate_service.transition_candidate(
        store, audit, candidate_id, request.status, actor
    )
