"""Employee record schemas."""

from typing import Optional
from pydantic import BaseModel, Field

from api.schemas.common import ORMModel, TimestampMixin


class EmployeeCreate(BaseModel):
    place_of_residence: str = Field(..., description="Current address, at least 5 characters")
    hometown: str = Field(..., description="At least 5 characters")
    national_id: str = Field(..., description="12-digit citizen identity number")
    user_id: Optional[str] = Field(None, description="Owning account; defaults to the caller")
    candidate_id: Optional[str] = Field(None, description="Hired candidate this record came from")


class EmployeeUpdate(BaseModel):
    place_of_residence: Optional[str] = None
    hometown: Optional[str] = None
    national_id: Optional[str] = None


class EmployeeResponse(ORMModel, TimestampMixin):
    id: str
    user_id: Optional[str] = None
    candidate_id: Optional[str] = None
    place_of_residence: str
    hometown: str
    national_id: str
