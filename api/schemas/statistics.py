"""Dashboard statistics and audit log schemas."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field

from api.schemas.common import ORMModel


class ShareResponse(ORMModel):
    key: str
    count: int
    percentage: int


class StatisticsResponse(ORMModel):
    total_candidates: int
    submitted_candidates: int
    interview_candidates: int
    hired_candidates: int
    total_interviews: int
    passed_interviews: int
    new_employees: int = Field(description="Employee records created this month")
    status_distribution: list[ShareResponse] = Field(default_factory=list)
    interview_results: list[ShareResponse] = Field(default_factory=list)


class AuditLogResponse(ORMModel):
    id: str
    actor_id: Optional[str] = None
    action: str
    target_type: str
    target_id: str
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
