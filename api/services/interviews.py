"""
Interview service functions.

An interview session fans out to one Interview row per interviewer. The
session, its interviews and the candidate's move to INTERVIEW are written in
one transaction.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union
import logging

from core.exceptions import (
    CandidateNotEligibleForInterview,
    InvalidTransition,
    NoInterviewerSelected,
    NotFound,
    SessionClosed,
    Unauthorized,
    ValidationFailed,
)
from core.security import Actor, INTERVIEWER_ROLES, require_staff
from core.utils.validators import (
    MIN_NOTES_LENGTH,
    MIN_TITLE_LENGTH,
    ensure_valid,
    validate_min_length,
)
from database.models.audit import AuditAction
from database.models.candidates import (
    Candidate,
    CandidateStatus,
    INTERVIEW_ELIGIBLE_STATUSES,
)
from database.models.interviews import (
    Interview,
    InterviewResult,
    InterviewSession,
    InterviewSessionStatus,
)
from database.models.users import User, UserStatus
from database.store import EntityStore
from api.services.audit import AuditRecorder
from api.services.candidates import apply_status_change, record_status_change

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionProgress:
    """Completion summary of a session's interviews."""

    total: int
    completed: int
    passed: int
    percentage: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "completed": self.completed,
            "passed": self.passed,
            "percentage": self.percentage,
        }


@dataclass
class SessionDetails:
    """A session with its interviews and progress."""

    session: InterviewSession
    interviews: List[Interview] = field(default_factory=list)
    progress: Optional[SessionProgress] = None


def compute_progress(interviews: Sequence[Interview]) -> SessionProgress:
    """
    Aggregate interview results.

    ``percentage`` is completed/total*100 rounded half up, 0 for no interviews.
    """
    total = len(interviews)
    completed = sum(1 for i in interviews if i.result != InterviewResult.PENDING)
    passed = sum(1 for i in interviews if i.result == InterviewResult.PASS)
    # integer round-half-up of completed * 100 / total
    percentage = (200 * completed + total) // (2 * total) if total else 0
    return SessionProgress(
        total=total, completed=completed, passed=passed, percentage=percentage
    )


def _parse_result(result: Union[InterviewResult, str]) -> InterviewResult:
    try:
        return InterviewResult(result.value if isinstance(result, InterviewResult) else str(result).upper())
    except ValueError:
        raise ValidationFailed("result", f"Unknown interview result: {result}")


async def _load_interviewers(
    store: EntityStore, interviewer_ids: Sequence[str]
) -> List[User]:
    users = await store.select(User, id=list(interviewer_ids))
    by_id = {user.id: user for user in users}
    for interviewer_id in interviewer_ids:
        user = by_id.get(interviewer_id)
        if user is None:
            raise NotFound("User", interviewer_id)
        if user.status != UserStatus.ACTIVE or user.role not in INTERVIEWER_ROLES:
            raise ValidationFailed(
                "interviewer_ids", f"User {interviewer_id} cannot be an interviewer"
            )
    return [by_id[i] for i in interviewer_ids]


async def create_session(
    store: EntityStore,
    audit: AuditRecorder,
    candidate_id: str,
    title: str,
    scheduled_date: Optional[datetime],
    interviewer_ids: Sequence[str],
    actor: Optional[Actor],
) -> SessionDetails:
    """
    Schedule an interview session and assign its interviewers.

    All-or-nothing: the session row, one PENDING interview per interviewer and
    the candidate's APPROVED -> INTERVIEW move commit together.

    Raises:
        NoInterviewerSelected: If ``interviewer_ids`` is empty
        CandidateNotEligibleForInterview: If the candidate is not APPROVED/INTERVIEW
        ValidationFailed: On duplicate or ineligible interviewers, or a short title
        NotFound: If the candidate or an interviewer does not exist
    """
    if not interviewer_ids:
        raise NoInterviewerSelected()
    if len(set(interviewer_ids)) != len(interviewer_ids):
        raise ValidationFailed("interviewer_ids", "Interviewers must not be repeated")
    ensure_valid("title", validate_min_length(title, MIN_TITLE_LENGTH, "Title"))
    require_staff(actor, "create interview sessions")

    async with store.transaction() as tx:
        candidate = await tx.get(Candidate, candidate_id)
        if candidate.status not in INTERVIEW_ELIGIBLE_STATUSES:
            raise CandidateNotEligibleForInterview(candidate_id, candidate.status.value)

        await _load_interviewers(tx, interviewer_ids)

        session = await tx.insert(
            InterviewSession,
            {
                "candidate_id": candidate_id,
                "title": title.strip(),
                "scheduled_date": scheduled_date,
                "status": InterviewSessionStatus.SCHEDULED,
                "created_by": actor.id,
            },
        )
        interviews = []
        for interviewer_id in interviewer_ids:
            interviews.append(
                await tx.insert(
                    Interview,
                    {
                        "candidate_id": candidate_id,
                        "interviewer_id": interviewer_id,
                        "interview_session_id": session.id,
                        "tech_notes": "",
                        "soft_notes": "",
                        "result": InterviewResult.PENDING,
                    },
                )
            )

        previous_status = candidate.status
        if candidate.status != CandidateStatus.INTERVIEW:
            candidate = await apply_status_change(tx, candidate, CandidateStatus.INTERVIEW)

    logger.info(
        f"Interview session {session.id} created for candidate {candidate_id} "
        f"with {len(interviews)} interviewers"
    )
    await audit.record(
        AuditAction.INTERVIEW_SESSION_CREATED,
        "interview_session",
        session.id,
        {
            "candidate_id": candidate_id,
            "title": session.title,
            "interviewer_ids": list(interviewer_ids),
        },
        actor_id=actor.id,
    )
    if previous_status != candidate.status:
        await record_status_change(audit, candidate_id, previous_status, candidate.status, actor)

    return SessionDetails(
        session=session, interviews=interviews, progress=compute_progress(interviews)
    )


def _ensure_can_view(actor: Optional[Actor], interviews: Sequence[Interview]) -> None:
    if actor is None:
        raise Unauthorized("Authentication required to view interview sessions")
    if not actor.is_staff and all(i.interviewer_id != actor.id for i in interviews):
        raise Unauthorized("Not allowed to view this interview session")


async def get_progress(
    store: EntityStore,
    session_id: str,
    actor: Optional[Actor],
) -> SessionProgress:
    """Completion summary of a session. Read-only; staff or one of its interviewers."""
    await store.get(InterviewSession, session_id)
    interviews = await store.select(Interview, interview_session_id=session_id)
    _ensure_can_view(actor, interviews)
    return compute_progress(interviews)


async def get_session_details(
    store: EntityStore,
    session_id: str,
    actor: Optional[Actor],
) -> SessionDetails:
    """Get a session with its interviews. Staff or one of its interviewers."""
    session = await store.get(InterviewSession, session_id)
    interviews = await store.select(
        Interview, order_by=["created_at"], interview_session_id=session_id
    )
    _ensure_can_view(actor, interviews)
    return SessionDetails(
        session=session, interviews=interviews, progress=compute_progress(interviews)
    )


async def list_sessions(
    store: EntityStore,
    actor: Optional[Actor],
    candidate_id: Optional[str] = None,
    status: Optional[Union[InterviewSessionStatus, str]] = None,
) -> List[SessionDetails]:
    """List sessions with their interviews and progress, newest first."""
    require_staff(actor, "list interview sessions")

    filters: Dict[str, Any] = {}
    if candidate_id:
        filters["candidate_id"] = candidate_id
    if status:
        try:
            filters["status"] = InterviewSessionStatus(
                status.value if isinstance(status, InterviewSessionStatus) else str(status).upper()
            )
        except ValueError:
            return []

    sessions = await store.select(InterviewSession, order_by=["-created_at"], **filters)
    if not sessions:
        return []

    interviews = await store.select(
        Interview,
        order_by=["created_at"],
        interview_session_id=[s.id for s in sessions],
    )
    grouped: Dict[str, List[Interview]] = {s.id: [] for s in sessions}
    for interview in interviews:
        grouped[interview.interview_session_id].append(interview)

    return [
        SessionDetails(
            session=s, interviews=grouped[s.id], progress=compute_progress(grouped[s.id])
        )
        for s in sessions
    ]


async def list_assigned_interviews(
    store: EntityStore,
    actor: Optional[Actor],
    interviewer_id: Optional[str] = None,
) -> List[Interview]:
    """Interviews assigned to ``interviewer_id`` (default: the actor), newest first."""
    if actor is None:
        raise Unauthorized("Authentication required to list interviews")
    interviewer_id = interviewer_id or actor.id
    if interviewer_id != actor.id and not actor.is_staff:
        raise Unauthorized("Not allowed to view another interviewer's assignments")
    return await store.select(
        Interview, order_by=["-created_at"], interviewer_id=interviewer_id
    )


async def record_evaluation(
    store: EntityStore,
    audit: AuditRecorder,
    interview_id: str,
    tech_notes: str,
    soft_notes: str,
    result: Union[InterviewResult, str],
    actor: Optional[Actor],
) -> Interview:
    """
    Save one interviewer's notes and result.

    Only the interview row changes; session and candidate status are left to
    explicit calls.

    Raises:
        Unauthorized: If the actor is neither the interviewer nor HR/Admin
        ValidationFailed: If a note is shorter than 10 characters
        SessionClosed: If the session is completed or cancelled
    """
    if actor is None:
        raise Unauthorized("Authentication required to evaluate interviews")

    interview = await store.get(Interview, interview_id)
    if interview.interviewer_id != actor.id and not actor.is_staff:
        raise Unauthorized("Only the assigned interviewer or HR/Admin may evaluate")

    ensure_valid(
        "tech_notes", validate_min_length(tech_notes, MIN_NOTES_LENGTH, "Technical notes")
    )
    ensure_valid(
        "soft_notes", validate_min_length(soft_notes, MIN_NOTES_LENGTH, "Soft-skill notes")
    )
    parsed_result = _parse_result(result)

    session = await store.get(InterviewSession, interview.interview_session_id)
    if session.status.is_closed:
        raise SessionClosed(session.id, session.status.value)

    updated = await store.update(
        Interview,
        interview_id,
        {
            "tech_notes": tech_notes.strip(),
            "soft_notes": soft_notes.strip(),
            "result": parsed_result,
        },
    )

    await audit.record(
        AuditAction.INTERVIEW_EVALUATED,
        "interview",
        interview_id,
        {
            "session_id": interview.interview_session_id,
            "candidate_id": interview.candidate_id,
            "from": interview.result,
            "to": parsed_result,
        },
        actor_id=actor.id,
    )
    return updated


async def _set_session_status(
    store: EntityStore,
    audit: AuditRecorder,
    session_id: str,
    target: InterviewSessionStatus,
    actor: Optional[Actor],
) -> InterviewSession:
    require_staff(actor, "change interview session status")

    session = await store.get(InterviewSession, session_id)
    previous = session.status
    if not previous.can_transition_to(target):
        raise InvalidTransition(previous.value, target.value, entity="interview session")

    updated = await store.update(InterviewSession, session_id, {"status": target})
    logger.info(f"Interview session {session_id} moved {previous.value} -> {target.value}")

    await audit.record(
        AuditAction.INTERVIEW_SESSION_STATUS_CHANGED,
        "interview_session",
        session_id,
        {"from": previous, "to": target, "actor": actor.id},
        actor_id=actor.id,
    )
    return updated


async def start_session(
    store: EntityStore, audit: AuditRecorder, session_id: str, actor: Optional[Actor]
) -> InterviewSession:
    """Mark a scheduled session as in progress."""
    return await _set_session_status(
        store, audit, session_id, InterviewSessionStatus.IN_PROGRESS, actor
    )


async def close_session(
    store: EntityStore, audit: AuditRecorder, session_id: str, actor: Optional[Actor]
) -> InterviewSession:
    """
    Mark a session as completed. Never done automatically, even when every
    interview has a result; HR decides when a session is over.
    """
    return await _set_session_status(
        store, audit, session_id, InterviewSessionStatus.COMPLETED, actor
    )


async def cancel_session(
    store: EntityStore, audit: AuditRecorder, session_id: str, actor: Optional[Actor]
) -> InterviewSession:
    """Cancel a session that has not been completed."""
    return await _set_session_status(
        store, audit, session_id, InterviewSessionStatus.CANCELLED, actor
    )
