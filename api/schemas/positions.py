"""Position schemas."""

from typing import Optional
from pydantic import BaseModel, Field

from api.schemas.common import ORMModel, TimestampMixin


class PositionCreate(BaseModel):
    title: str = Field(min_length=2, max_length=200)
    department: str = Field(min_length=2, max_length=100)
    description: str = Field(default="", description="Job description shown on the application form")
    is_open: bool = True


class PositionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    department: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    is_open: Optional[bool] = None


class PositionResponse(ORMModel, TimestampMixin):
    id: str
    title: str
    department: str
    description: str
    is_open: bool
