"""
Candidate Models

A candidate is one application: a person (bound by email) applying to one
position. The same email may apply to several positions, but only once per
position. The status column is the hiring pipeline state.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    Integer,
    ForeignKey,
    UniqueConstraint,
    Enum as SQLEnum,
)
from database.engine import Base
from database.models.mixins import IdMixin, TimestampMixin
from enum import Enum as PyEnum


# ==================== Candidate Enums ===================== #
class CandidateStatus(str, PyEnum):
    """Hiring pipeline state of a candidate."""

    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    INTERVIEW = "INTERVIEW"
    OFFERED = "OFFERED"
    HIRED = "HIRED"
    NOT_HIRED = "NOT_HIRED"

    def is_terminal(self) -> bool:
        return self in CANDIDATE_STATUS_TERMINALS

    def can_transition_to(self, new: "CandidateStatus") -> bool:
        return new in CANDIDATE_STATUS_TRANSITIONS.get(self, set())

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()

    @classmethod
    def try_parse(cls, value: str) -> "CandidateStatus | None":
        if value is None:
            return None
        try:
            normalized = str(value).strip().upper().replace(" ", "_").replace("-", "_")
            return cls(normalized)
        except ValueError:
            return None


# Helpers
CANDIDATE_STATUS_TERMINALS = {
    CandidateStatus.REJECTED,
    CandidateStatus.HIRED,
    CandidateStatus.NOT_HIRED,
}

CANDIDATE_STATUS_TRANSITIONS = {
    CandidateStatus.SUBMITTED: {
        CandidateStatus.APPROVED,
        CandidateStatus.REJECTED,
    },
    CandidateStatus.APPROVED: {
        CandidateStatus.INTERVIEW,
    },
    CandidateStatus.INTERVIEW: {
        CandidateStatus.OFFERED,
        CandidateStatus.NOT_HIRED,
    },
    CandidateStatus.OFFERED: {
        CandidateStatus.HIRED,
        CandidateStatus.NOT_HIRED,
    },
    CandidateStatus.REJECTED: set(),
    CandidateStatus.HIRED: set(),
    CandidateStatus.NOT_HIRED: set(),
}

# Edges that only the decision resolver may take
DECISION_ONLY_TRANSITIONS = {
    (CandidateStatus.INTERVIEW, CandidateStatus.OFFERED),
    (CandidateStatus.INTERVIEW, CandidateStatus.NOT_HIRED),
}

INTERVIEW_ELIGIBLE_STATUSES = {
    CandidateStatus.APPROVED,
    CandidateStatus.INTERVIEW,
}


# ==================== Candidate Model ===================== #
class Candidate(Base, IdMixin, TimestampMixin):
    """
    Job application submitted from the public form.
    ``version`` is bumped on every status write for optimistic concurrency.
    """

    __tablename__ = "candidates"
    __table_args__ = (
        UniqueConstraint(
            "email", "applied_position_id", name="uq_candidates_email_position"
        ),
    )

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(15), nullable=False)
    cv_url: Mapped[str | None] = mapped_column(String(2048))
    applied_position_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("positions.id"), nullable=False, index=True
    )
    status: Mapped[CandidateStatus] = mapped_column(
        SQLEnum(CandidateStatus, native_enum=False, length=20),
        nullable=False,
        default=CandidateStatus.SUBMITTED,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
