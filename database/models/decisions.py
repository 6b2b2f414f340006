from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, ForeignKey, DateTime, func, Enum as SQLEnum
from database.engine import Base
from database.models.mixins import IdMixin
from datetime import datetime
from enum import Enum as PyEnum


class DecisionType(str, PyEnum):
    HIRE = "HIRE"
    NO_HIRE = "NO_HIRE"


class Decision(Base, IdMixin):
    """Hire/no-hire verdict recorded by HR/Admin after interviews."""

    __tablename__ = "decisions"

    candidate_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("candidates.id"), nullable=False, index=True
    )
    decided_by: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    decision: Mapped[DecisionType] = mapped_column(
        SQLEnum(DecisionType, native_enum=False, length=20), nullable=False
    )
    decision_notes: Mapped[str] = mapped_column(Text, nullable=False)
    decided_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
