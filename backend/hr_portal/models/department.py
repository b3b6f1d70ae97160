from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hr_portal.db.base import Base, IntegerIDMixin, OwnedMixin, TimestampMixin


class Department(Base, IntegerIDMixin, TimestampMixin, OwnedMixin):
    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
