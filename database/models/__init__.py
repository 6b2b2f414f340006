"""Import every model so the tables are registered on ``Base.metadata``."""

from database.models.users import User, UserRole, UserStatus
from database.models.positions import Position
from database.models.candidates import Candidate, CandidateStatus
from database.models.interviews import (
    InterviewSession,
    InterviewSessionStatus,
    Interview,
    InterviewResult,
)
from database.models.decisions import Decision, DecisionType
from database.models.employees import Employee
from database.models.audit import AuditLog, AuditAction

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "Position",
    "Candidate",
    "CandidateStatus",
    "InterviewSession",
    "InterviewSessionStatus",
    "Interview",
    "InterviewResult",
    "Decision",
    "DecisionType",
    "Employee",
    "AuditLog",
    "AuditAction",
]
