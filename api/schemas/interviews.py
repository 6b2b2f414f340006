"""Interview session and evaluation schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from api.schemas.common import ORMModel, TimestampMixin
from database.models.interviews import InterviewResult, InterviewSessionStatus


class SessionCreate(BaseModel):
    """Request model for scheduling an interview session."""

    candidate_id: str = Field(..., description="Candidate to interview")
    title: str = Field(..., description="Session title, at least 5 characters")
    scheduled_date: Optional[datetime] = Field(None, description="Session date and time (ISO 8601)")
    interviewer_ids: list[str] = Field(default_factory=list, description="Interviewer user IDs")


class EvaluationRequest(BaseModel):
    """One interviewer's notes and result."""

    tech_notes: str = Field(..., description="Technical assessment, at least 10 characters")
    soft_notes: str = Field(..., description="Soft-skill assessment, at least 10 characters")
    result: str = Field(..., description="PASS, FAIL or PENDING")


class InterviewSessionResponse(ORMModel, TimestampMixin):
    id: str
    candidate_id: str
    title: str
    scheduled_date: Optional[datetime] = None
    status: InterviewSessionStatus
    created_by: str


class InterviewResponse(ORMModel, TimestampMixin):
    id: str
    candidate_id: str
    interviewer_id: str
    interview_session_id: str
    tech_notes: str
    soft_notes: str
    result: InterviewResult


class ProgressResponse(BaseModel):
    total: int
    completed: int
    passed: int
    percentage: int


class SessionDetailsResponse(BaseModel):
    session: InterviewSessionResponse
    interviews: list[InterviewResponse] = Field(default_factory=list)
    progress: Optional[ProgressResponse] = None

    @classmethod
    def from_details(cls, details) -> "SessionDetailsResponse":
        """Build from ``api.services.interviews.SessionDetails``."""
        return cls(
            session=InterviewSessionResponse.model_validate(details.session),
            interviews=[InterviewResponse.model_validate(i) for i in details.interviews],
            progress=ProgressResponse(**details.progress.to_dict()) if details.progress else None,
        )
