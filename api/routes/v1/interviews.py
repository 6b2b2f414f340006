"""
Interview session and evaluation endpoints.

Provides REST API for scheduling sessions, following their progress, moving
them through their lifecycle and recording each interviewer's evaluation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_audit, get_store, require_actor
from api.schemas.interviews import (
    EvaluationRequest,
    InterviewResponse,
    InterviewSessionResponse,
    ProgressResponse,
    SessionCreate,
    SessionDetailsResponse,
)
from api.services import interviews as interview_service
from api.services.audit import AuditRecorder
from core.security import Actor
from database.store import EntityStore

router = APIRouter()


@router.post(
    "/sessions",
    response_model=SessionDetailsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Interview Session",
    description=(
        "Schedule a session for an approved or interviewing candidate and create one "
        "pending interview per interviewer. HR/Admin only."
    ),
)
async def create_session(
    request: SessionCreate,
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    details = await interview_service.create_session(
        store,
        audit,
        candidate_id=request.candidate_id,
        title=request.title,
        scheduled_date=request.scheduled_date,
        interviewer_ids=request.interviewer_ids,
        actor=actor,
    )
    return SessionDetailsResponse.from_details(details)


@router.get(
    "/sessions",
    response_model=list[SessionDetailsResponse],
    summary="List Interview Sessions",
)
async def list_sessions(
    candidate_id: Optional[str] = Query(None, description="Filter by candidate"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    sessions = await interview_service.list_sessions(
        store, actor, candidate_id=candidate_id, status=status_filter
    )
    return [SessionDetailsResponse.from_details(details) for details in sessions]


@router.get(
    "/sessions/{session_id}",
    response_model=SessionDetailsResponse,
    summary="Get Interview Session",
)
async def get_session(
    session_id: str = Path(..., description="Session ID"),
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    details = await interview_service.get_session_details(store, session_id, actor)
    return SessionDetailsResponse.from_details(details)


@router.get(
    "/sessions/{session_id}/progress",
    response_model=ProgressResponse,
    summary="Get Session Progress",
    description="Total, completed and passed interviews with the completion percentage.",
)
async def get_progress(
    session_id: str = Path(..., description="Session ID"),
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    progress = await interview_service.get_progress(store, session_id, actor)
    return ProgressResponse(**progress.to_dict())


@router.post(
    "/sessions/{session_id}/start",
    response_model=InterviewSessionResponse,
    summary="Start Session",
)
async def start_session(
    session_id: str = Path(..., description="Session ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await interview_service.start_session(store, audit, session_id, actor)


@router.post(
    "/sessions/{session_id}/complete",
    response_model=InterviewSessionResponse,
    summary="Complete Session",
)
async def close_session(
    session_id: str = Path(..., description="Session ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await interview_service.close_session(store, audit, session_id, actor)


@router.post(
    "/sessions/{session_id}/cancel",
    response_model=InterviewSessionResponse,
    summary="Cancel Session",
)
async def cancel_session(
    session_id: str = Path(..., description="Session ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await interview_service.cancel_session(store, audit, session_id, actor)


@router.get(
    "/mine",
    response_model=list[InterviewResponse],
    summary="My Interviews",
    description="Interviews assigned to the calling user, newest first.",
)
async def list_my_interviews(
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await interview_service.list_assigned_interviews(store, actor)


@router.put(
    "/{interview_id}/evaluation",
    response_model=InterviewResponse,
    summary="Record Evaluation",
    description="Save the assigned interviewer's notes and result.",
)
async def record_evaluation(
    request: EvaluationRequest,
    interview_id: str = Path(..., description="Interview ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await interview_service.record_evaluation(
        store,
        audit,
        interview_id,
        tech_notes=request.tech_notes,
        soft_notes=request.soft_notes,
        result=request.result,
        actor=actor,
    )
