"""
Interview Models

An interview session is one scheduled evaluation of a candidate. It fans out
to one Interview row per interviewer, created together with the session;
each interviewer records notes and a result on their own row.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    Text,
    ForeignKey,
    DateTime,
    UniqueConstraint,
    Enum as SQLEnum,
)
from database.engine import Base
from database.models.mixins import IdMixin, TimestampMixin
from datetime import datetime
from enum import Enum as PyEnum


# ============ Interview Enums ============ #
class InterviewSessionStatus(str, PyEnum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    def can_transition_to(self, new: "InterviewSessionStatus") -> bool:
        return new in SESSION_STATUS_TRANSITIONS.get(self, set())

    @property
    def is_closed(self) -> bool:
        return self in (InterviewSessionStatus.COMPLETED, InterviewSessionStatus.CANCELLED)


class InterviewResult(str, PyEnum):
    PENDING = "PENDING"
    PASS = "PASS"
    FAIL = "FAIL"


SESSION_STATUS_TRANSITIONS = {
    InterviewSessionStatus.SCHEDULED: {
        InterviewSessionStatus.IN_PROGRESS,
        InterviewSessionStatus.COMPLETED,
        InterviewSessionStatus.CANCELLED,
    },
    InterviewSessionStatus.IN_PROGRESS: {
        InterviewSessionStatus.COMPLETED,
        InterviewSessionStatus.CANCELLED,
    },
    InterviewSessionStatus.COMPLETED: set(),
    InterviewSessionStatus.CANCELLED: set(),
}


# ==================== Models ===================== #
class InterviewSession(Base, IdMixin, TimestampMixin):
    """Scheduled evaluation event for one candidate."""

    __tablename__ = "interview_sessions"

    candidate_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("candidates.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    scheduled_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    status: Mapped[InterviewSessionStatus] = mapped_column(
        SQLEnum(InterviewSessionStatus, native_enum=False, length=20),
        nullable=False,
        default=InterviewSessionStatus.SCHEDULED,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )


class Interview(Base, IdMixin, TimestampMixin):
    """One interviewer's evaluation within a session."""

    __tablename__ = "interviews"
    __table_args__ = (
        UniqueConstraint(
            "interview_session_id",
            "interviewer_id",
            name="uq_interviews_session_interviewer",
        ),
    )

    candidate_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("candidates.id"), nullable=False, index=True
    )
    interviewer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    interview_session_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("interview_sessions.id"), nullable=False, index=True
    )
    tech_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    soft_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    result: Mapped[InterviewResult] = mapped_column(
        SQLEnum(InterviewResult, native_enum=False, length=20),
        nullable=False,
        default=InterviewResult.PENDING,
    )
