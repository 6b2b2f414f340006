from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Enum as SQLEnum
from database.engine import Base
from database.models.mixins import IdMixin, TimestampMixin
from enum import Enum as PyEnum


# ==================== User Enums ===================== #
class UserRole(str, PyEnum):
    ADMIN = "ADMIN"  # full access, manages positions and accounts
    HR = "HR"  # runs the hiring pipeline
    EMPLOYEE = "EMPLOYEE"  # interviews candidates, owns an employee record


class UserStatus(str, PyEnum):
    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"


# ==================== User Model ===================== #
class User(Base, IdMixin, TimestampMixin):
    """
    Staff account. Candidates never get a User row until they are hired and
    provisioned by HR/Admin.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    phone: Mapped[str] = mapped_column(String(15), nullable=False)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, native_enum=False, length=20),
        nullable=False,
        default=UserRole.EMPLOYEE,
        index=True,
    )
    status: Mapped[UserStatus] = mapped_column(
        SQLEnum(UserStatus, native_enum=False, length=20),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    password_hash: Mapped[str | None] = mapped_column(String(255))

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE
