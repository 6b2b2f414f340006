"""Candidate-related Pydantic schemas."""

from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from api.schemas.common import ORMModel, TimestampMixin
from api.schemas.decisions import DecisionResponse
from api.schemas.interviews import InterviewResponse, InterviewSessionResponse
from api.schemas.positions import PositionResponse
from database.models.candidates import CandidateStatus


class ApplicationCreate(BaseModel):
    """Public application form."""

    full_name: str = Field(min_length=2, max_length=100, description="Applicant's full name")
    email: EmailStr
    phone: str = Field(min_length=9, max_length=15, description="Contact phone number")
    applied_position_id: str = Field(description="Position being applied to")
    cv_url: Optional[str] = Field(None, max_length=2048, description="URL of the uploaded CV")

    @field_validator("full_name", "phone", mode="before")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Strip whitespace from text fields."""
        if isinstance(v, str):
            return v.strip()
        return v


class StatusChangeRequest(BaseModel):
    """Requested candidate status."""

    status: str = Field(description="Target status, e.g. APPROVED or REJECTED")


class CandidateResponse(ORMModel, TimestampMixin):
    """Schema for candidate response."""

    id: str = Field(description="Unique candidate identifier")
    full_name: str
    email: str
    phone: str
    cv_url: Optional[str] = None
    applied_position_id: str
    status: CandidateStatus
    version: int = Field(description="Incremented on every status change")


class CandidateDetailsResponse(BaseModel):
    """A candidate with position, sessions, interviews and decisions."""

    candidate: CandidateResponse
    position: Optional[PositionResponse] = None
    sessions: list[InterviewSessionResponse] = Field(default_factory=list)
    interviews: list[InterviewResponse] = Field(default_factory=list)
    decisions: list[DecisionResponse] = Field(default_factory=list)

    @classmethod
    def from_details(cls, details) -> "CandidateDetailsResponse":
        """Build from ``api.services.candidates.CandidateDetails``."""
        return cls(
            candidate=CandidateResponse.model_validate(details.candidate),
            position=PositionResponse.model_validate(details.position) if details.position else None,
            sessions=[InterviewSessionResponse.model_validate(s) for s in details.sessions],
            interviews=[InterviewResponse.model_validate(i) for i in details.interviews],
            decisions=[DecisionResponse.model_validate(d) for d in details.decisions],
        )
