"""Decision service functions."""

from typing import List, Optional, Union
import logging

from core.exceptions import InvalidTransition, ValidationFailed
from core.security import Actor, require_staff
from core.utils.validators import MIN_NOTES_LENGTH, ensure_valid, validate_min_length
from database.models.audit import AuditAction
from database.models.candidates import Candidate, CandidateStatus
from database.models.decisions import Decision, DecisionType
from database.store import EntityStore
from api.services.audit import AuditRecorder
from api.services.candidates import apply_status_change, record_status_change

logger = logging.getLogger(__name__)

DECISION_OUTCOMES = {
    DecisionType.HIRE: CandidateStatus.OFFERED,
    DecisionType.NO_HIRE: CandidateStatus.NOT_HIRED,
}


def _parse_decision(decision: Union[DecisionType, str]) -> DecisionType:
    try:
        return DecisionType(decision.value if isinstance(decision, DecisionType) else str(decision).upper())
    except ValueError:
        raise ValidationFailed("decision", f"Unknown decision: {decision}")


async def record_decision(
    store: EntityStore,
    audit: AuditRecorder,
    candidate_id: str,
    decision: Union[DecisionType, str],
    notes: str,
    actor: Optional[Actor],
) -> Decision:
    """
    Record the hire/no-hire verdict for an interviewed candidate.

    HIRE moves the candidate to OFFERED, NO_HIRE to NOT_HIRED. Confirming the
    hire (OFFERED -> HIRED) and creating the employee record are separate
    calls made by the caller.

    Raises:
        Unauthorized: If the actor is not HR/Admin
        ValidationFailed: If the notes are shorter than 10 characters
        InvalidTransition: If the candidate is not in INTERVIEW
    """
    require_staff(actor, "record hiring decisions")
    ensure_valid(
        "decision_notes", validate_min_length(notes, MIN_NOTES_LENGTH, "Decision notes")
    )
    verdict = _parse_decision(decision)
    target = DECISION_OUTCOMES[verdict]

    async with store.transaction() as tx:
        candidate = await tx.get(Candidate, candidate_id)
        previous_status = candidate.status
        if previous_status != CandidateStatus.INTERVIEW:
            raise InvalidTransition(previous_status.value, target.value)

        record = await tx.insert(
            Decision,
            {
                "candidate_id": candidate_id,
                "decided_by": actor.id,
                "decision": verdict,
                "decision_notes": notes.strip(),
            },
        )
        candidate = await apply_status_change(
            tx, candidate, target, allow_decision_edges=True
        )

    logger.info(f"Decision {verdict.value} recorded for candidate {candidate_id}")
    await audit.record(
        AuditAction.DECISION_RECORDED,
        "candidate",
        candidate_id,
        {"decision_id": record.id, "decision": verdict},
        actor_id=actor.id,
    )
    await record_status_change(audit, candidate_id, previous_status, candidate.status, actor)
    return record


async def list_decisions(
    store: EntityStore,
    candidate_id: str,
    actor: Optional[Actor],
) -> List[Decision]:
    """Decisions recorded for a candidate, newest first."""
    require_staff(actor, "view hiring decisions")
    await store.get(Candidate, candidate_id)
    return await store.select(Decision, order_by=["-decided_at"], candidate_id=candidate_id)
