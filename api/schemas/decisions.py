"""Hiring decision schemas."""

from datetime import datetime
from pydantic import BaseModel, Field

from api.schemas.common import ORMModel
from database.models.decisions import DecisionType


class DecisionCreate(BaseModel):
    decision: str = Field(..., description="HIRE or NO_HIRE")
    notes: str = Field(..., description="Reasoning behind the decision, at least 10 characters")


class DecisionResponse(ORMModel):
    id: str
    candidate_id: str
    decided_by: str
    decision: DecisionType
    decision_notes: str
    decided_at: datetime
