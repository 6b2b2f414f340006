"""
Typed errors raised by the entity store and the workflow services.

Every error carries a stable ``code`` so the HTTP layer can translate it
without inspecting messages or backend-specific error codes.
"""

from typing import Any, Optional


class WorkflowError(Exception):
    """Base exception for recoverable workflow and store errors."""

    code = "WORKFLOW_ERROR"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


class InvalidTransition(WorkflowError):
    """Raised when a requested status change is not allowed from the current state."""

    code = "INVALID_TRANSITION"

    def __init__(self, current: str, requested: str, entity: str = "candidate"):
        super().__init__(
            f"Cannot move {entity} from {current} to {requested}",
            current=current,
            requested=requested,
        )
        self.current = current
        self.requested = requested


class CandidateNotEligibleForInterview(WorkflowError):
    """Raised when a session is created for a candidate outside APPROVED/INTERVIEW."""

    code = "CANDIDATE_NOT_ELIGIBLE_FOR_INTERVIEW"

    def __init__(self, candidate_id: str, status: str):
        super().__init__(
            f"Candidate {candidate_id} with status {status} cannot be interviewed",
            candidate_id=candidate_id,
            status=status,
        )


class NoInterviewerSelected(WorkflowError):
    """Raised when a session is created without interviewers."""

    code = "NO_INTERVIEWER_SELECTED"

    def __init__(self):
        super().__init__("At least one interviewer must be selected")


class DuplicateApplication(WorkflowError):
    """Raised when the same email applies twice to the same position."""

    code = "DUPLICATE_APPLICATION"

    def __init__(self, email: str, position_id: str):
        super().__init__(
            "An application for this position already exists for this email",
            position_id=position_id,
        )
        self.email = email


class UniqueConstraintViolation(WorkflowError):
    """Raised by the store when a unique constraint is violated."""

    code = "UNIQUE_CONSTRAINT_VIOLATION"

    def __init__(self, table: str, detail: Optional[str] = None):
        super().__init__(f"Duplicate value in {table}", table=table)
        self.table = table
        self.detail = detail


class ForeignKeyViolation(WorkflowError):
    """Raised by the store when a referenced row does not exist."""

    code = "FOREIGN_KEY_VIOLATION"

    def __init__(self, table: str, detail: Optional[str] = None):
        super().__init__(f"Invalid reference from {table}", table=table)
        self.table = table
        self.detail = detail


class NotFound(WorkflowError):
    """Raised when a referenced entity id does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found", entity=entity, id=str(entity_id))
        self.entity = entity
        self.entity_id = entity_id


class Unauthorized(WorkflowError):
    """Raised when the acting user may not perform the mutation."""

    code = "UNAUTHORIZED"


class ValidationFailed(WorkflowError):
    """Raised when input data breaks a domain validation rule."""

    code = "VALIDATION_FAILED"

    def __init__(self, field: str, message: str):
        super().__init__(message, field=field)
        self.field = field


class PositionNotOpen(WorkflowError):
    """Raised when applying to a closed position."""

    code = "POSITION_NOT_OPEN"

    def __init__(self, position_id: str):
        super().__init__("Position is not open for applications", position_id=position_id)


class SessionClosed(WorkflowError):
    """Raised when evaluating an interview of a completed or cancelled session."""

    code = "SESSION_CLOSED"

    def __init__(self, session_id: str, status: str):
        super().__init__(
            f"Interview session is {status}",
            session_id=session_id,
            status=status,
        )


class ConcurrentModification(WorkflowError):
    """Raised when a versioned update lost a race with another writer."""

    code = "CONCURRENT_MODIFICATION"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity} {entity_id} was modified by another request",
            entity=entity,
            id=str(entity_id),
        )


class StoreUnavailable(WorkflowError):
    """Raised when the database cannot be reached."""

    code = "STORE_UNAVAILABLE"

    def __init__(self, message: str = "Database service temporarily unavailable"):
        super().__init__(message)
