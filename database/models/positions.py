from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, Text
from database.engine import Base
from database.models.mixins import IdMixin, TimestampMixin


class Position(Base, IdMixin, TimestampMixin):
    """A job opening candidates can apply to while it is open."""

    __tablename__ = "positions"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_open: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )
