"""Common Pydantic schemas shared across the API."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ORMModel(BaseModel):
    """Base for response models read from ORM rows."""

    model_config = ConfigDict(from_attributes=True)


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""

    created_at: Optional[datetime] = Field(None, description="Timestamp when the resource was created")
    updated_at: Optional[datetime] = Field(None, description="Timestamp when the resource was last updated")


class ErrorDetail(BaseModel):
    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Sanitized, human-readable message")
    path: Optional[str] = None
    method: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing endpoint."""

    error: ErrorDetail
