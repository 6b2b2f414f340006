from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, DateTime, func, JSON
from database.engine import Base
from database.models.mixins import IdMixin
from datetime import datetime
from enum import Enum as PyEnum
from typing import Any


# ============ Audit Enums ============ #
class AuditAction(str, PyEnum):
    """Audit action types recorded by the workflow services."""

    CANDIDATE_SUBMITTED = "CANDIDATE_SUBMITTED"
    STATUS_CHANGED = "STATUS_CHANGED"
    INTERVIEW_SESSION_CREATED = "INTERVIEW_SESSION_CREATED"
    INTERVIEW_SESSION_STATUS_CHANGED = "INTERVIEW_SESSION_STATUS_CHANGED"
    INTERVIEW_EVALUATED = "INTERVIEW_EVALUATED"
    DECISION_RECORDED = "DECISION_RECORDED"
    USER_CREATED = "USER_CREATED"
    USER_UPDATED = "USER_UPDATED"
    POSITION_CREATED = "POSITION_CREATED"
    POSITION_UPDATED = "POSITION_UPDATED"
    EMPLOYEE_CREATED = "EMPLOYEE_CREATED"
    EMPLOYEE_UPDATED = "EMPLOYEE_UPDATED"


# ==================== Models ===================== #
class AuditLog(Base, IdMixin):
    """
    Append-only trail of every mutating action. ``actor_id`` is empty for
    anonymous actions such as public applications.
    """

    __tablename__ = "audit_logs"

    actor_id: Mapped[str | None] = mapped_column(String(36), index=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    target_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    target_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
