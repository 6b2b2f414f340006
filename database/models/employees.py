from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, ForeignKey
from database.engine import Base
from database.models.mixins import IdMixin, TimestampMixin


class Employee(Base, IdMixin, TimestampMixin):
    """
    Personnel record of a hired person. ``user_id`` stays empty until an
    account has been provisioned; each account owns at most one record.
    """

    __tablename__ = "employees"

    user_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id"), unique=True, index=True
    )
    candidate_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("candidates.id"), index=True
    )
    place_of_residence: Mapped[str] = mapped_column(String(255), nullable=False)
    hometown: Mapped[str] = mapped_column(String(255), nullable=False)
    national_id: Mapped[str] = mapped_column(
        String(12), unique=True, nullable=False, index=True
    )
