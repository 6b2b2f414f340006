"""
Candidate service functions.

Holds the candidate lifecycle state machine: every status write goes through
``apply_status_change`` which checks the transition table and performs a
single versioned UPDATE.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import logging

from core.exceptions import (
    DuplicateApplication,
    InvalidTransition,
    NotFound,
    PositionNotOpen,
    Unauthorized,
    UniqueConstraintViolation,
)
from core.security import Actor, require_staff
from core.utils.validators import (
    ensure_valid,
    validate_email,
    validate_full_name,
    validate_phone,
)
from database.models.audit import AuditAction
from database.models.candidates import (
    Candidate,
    CandidateStatus,
    DECISION_ONLY_TRANSITIONS,
)
from database.models.decisions import Decision
from database.models.interviews import Interview, InterviewSession
from database.models.positions import Position
from database.store import EntityStore
from api.services.audit import AuditRecorder

logger = logging.getLogger(__name__)


@dataclass
class CandidateDetails:
    """A candidate with everything recorded about them."""

    candidate: Candidate
    position: Optional[Position]
    sessions: List[InterviewSession] = field(default_factory=list)
    interviews: List[Interview] = field(default_factory=list)
    decisions: List[Decision] = field(default_factory=list)


def _status_value(status: Union[CandidateStatus, str]) -> str:
    return status.value if isinstance(status, CandidateStatus) else str(status)


async def apply_status_change(
    store: EntityStore,
    candidate: Candidate,
    target: Union[CandidateStatus, str],
    allow_decision_edges: bool = False,
) -> Candidate:
    """
    Move ``candidate`` to ``target`` if the transition table allows it.

    The UPDATE is guarded by the version read with ``candidate``; if another
    writer changed the row in between, ``ConcurrentModification`` is raised
    and nothing is written.

    Args:
        store: Entity store (usually bound to the caller's transaction)
        candidate: Candidate as currently read
        target: Requested status
        allow_decision_edges: Whether INTERVIEW -> OFFERED/NOT_HIRED is allowed

    Raises:
        InvalidTransition: If the pair is not in the transition table
    """
    current = candidate.status
    requested = CandidateStatus.try_parse(_status_value(target))
    if requested is None or not current.can_transition_to(requested):
        raise InvalidTransition(current.value, _status_value(target))
    if (current, requested) in DECISION_ONLY_TRANSITIONS and not allow_decision_edges:
        raise InvalidTransition(current.value, requested.value)

    updated = await store.update(
        Candidate,
        candidate.id,
        {"status": requested},
        expected_version=candidate.version,
    )
    logger.info(f"Candidate {candidate.id} moved {current.value} -> {requested.value}")
    return updated


async def record_status_change(
    audit: AuditRecorder,
    candidate_id: str,
    from_status: CandidateStatus,
    to_status: CandidateStatus,
    actor: Optional[Actor],
) -> None:
    """Emit the STATUS_CHANGED audit event."""
    await audit.record(
        AuditAction.STATUS_CHANGED,
        "candidate",
        candidate_id,
        {
            "from": from_status,
            "to": to_status,
            "actor": actor.id if actor else None,
        },
        actor_id=actor.id if actor else None,
    )


async def transition_candidate(
    store: EntityStore,
    audit: AuditRecorder,
    candidate_id: str,
    target: Union[CandidateStatus, str],
    actor: Optional[Actor],
) -> Candidate:
    """
    Change a candidate's status on behalf of HR/Admin.

    INTERVIEW -> OFFERED/NOT_HIRED is only reachable through
    ``api.services.decisions.record_decision``.
    """
    require_staff(actor, "change candidate status")

    candidate = await store.get(Candidate, candidate_id)
    previous = candidate.status
    updated = await apply_status_change(store, candidate, target)

    await record_status_change(audit, candidate_id, previous, updated.status, actor)
    return updated


async def submit_application(
    store: EntityStore,
    audit: AuditRecorder,
    full_name: str,
    email: str,
    phone: str,
    applied_position_id: str,
    cv_url: Optional[str] = None,
    actor: Optional[Actor] = None,
) -> Candidate:
    """
    Create a candidate from the public application form. No login required.

    Raises:
        ValidationFailed: If a field is malformed
        NotFound: If the position does not exist
        PositionNotOpen: If the position is closed
        DuplicateApplication: If this email already applied to this position
    """
    ensure_valid("full_name", validate_full_name(full_name))
    normalized_email = ensure_valid("email", validate_email(email))
    ensure_valid("phone", validate_phone(phone))

    position = await store.get(Position, applied_position_id)
    if not position.is_open:
        raise PositionNotOpen(applied_position_id)

    try:
        candidate = await store.insert(
            Candidate,
            {
                "full_name": full_name.strip(),
                "email": normalized_email,
                "phone": phone.strip(),
                "cv_url": cv_url,
                "applied_position_id": applied_position_id,
                "status": CandidateStatus.SUBMITTED,
            },
        )
    except UniqueConstraintViolation as exc:
        raise DuplicateApplication(normalized_email, applied_position_id) from exc

    logger.info(f"Application {candidate.id} submitted for position {applied_position_id}")
    await audit.record(
        AuditAction.CANDIDATE_SUBMITTED,
        "candidate",
        candidate.id,
        {"position_id": applied_position_id, "position_title": position.title},
        actor_id=actor.id if actor else None,
    )
    return candidate


async def get_candidate(
    store: EntityStore,
    candidate_id: str,
    actor: Optional[Actor],
) -> Candidate:
    """Get a candidate. Staff, or an interviewer assigned to the candidate."""
    candidate = await store.get(Candidate, candidate_id)
    await _ensure_can_view(store, candidate, actor)
    return candidate


async def _ensure_can_view(store: EntityStore, candidate: Candidate, actor: Optional[Actor]) -> None:
    if actor is not None and actor.is_staff:
        return
    if actor is not None:
        assigned = await store.count(
            Interview, candidate_id=candidate.id, interviewer_id=actor.id
        )
        if assigned:
            return
    raise Unauthorized("Not allowed to view this candidate")


async def list_candidates(
    store: EntityStore,
    actor: Optional[Actor],
    status: Optional[Union[CandidateStatus, str]] = None,
    position_id: Optional[str] = None,
) -> List[Candidate]:
    """List candidates with filtering, newest first."""
    require_staff(actor, "list candidates")

    filters: Dict[str, Any] = {}
    if status:
        parsed = CandidateStatus.try_parse(_status_value(status))
        if parsed is None:
            return []
        filters["status"] = parsed
    if position_id:
        filters["applied_position_id"] = position_id
    return await store.select(Candidate, order_by=["-created_at"], **filters)


async def get_candidate_details(
    store: EntityStore,
    candidate_id: str,
    actor: Optional[Actor],
) -> CandidateDetails:
    """Get a candidate with position, interview sessions, interviews and decisions."""
    candidate = await get_candidate(store, candidate_id, actor)

    try:
        position = await store.get(Position, candidate.applied_position_id)
    except NotFound:
        position = None

    sessions = await store.select(
        InterviewSession, order_by=["-created_at"], candidate_id=candidate_id
    )
    interviews = await store.select(
        Interview, order_by=["created_at"], candidate_id=candidate_id
    )
    decisions = await store.select(
        Decision, order_by=["-decided_at"], candidate_id=candidate_id
    )
    return CandidateDetails(
        candidate=candidate,
        position=position,
        sessions=sessions,
        interviews=interviews,
        decisions=decisions,
    )
