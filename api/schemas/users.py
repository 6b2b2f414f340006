"""User account schemas."""

from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from api.schemas.common import ORMModel, TimestampMixin
from database.models.users import UserRole, UserStatus


class UserCreate(BaseModel):
    full_name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=9, max_length=15)
    role: str = Field(default=UserRole.EMPLOYEE.value, description="ADMIN, HR or EMPLOYEE")


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=9, max_length=15)
    role: Optional[str] = None


class UserStatusUpdate(BaseModel):
    status: str = Field(..., description="ACTIVE or DISABLED")


class UserResponse(ORMModel, TimestampMixin):
    """Account data. Never includes the password hash."""

    id: str
    username: str
    email: str
    phone: str
    full_name: str
    role: UserRole
    status: UserStatus


class ProvisionedUserResponse(BaseModel):
    """A new account with its one-time password."""

    user: UserResponse
    password: str = Field(description="Shown once; only a hash is stored")
