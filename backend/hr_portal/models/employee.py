import enum
from datetime import datetime

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from hr_portal.db.base import Base, IntegerIDMixin, OwnedMixin, TimestampMixin, UTCDateTime


class EmploymentStatus(str, enum.Enum):
    ACTIVE = "Active"
    ON_LEAVE = "OnLeave"
    TERMINATED = "Terminated"
    SUSPENDED = "Suspended"


class Employee(Base, IntegerIDMixin, TimestampMixin, OwnedMixin):
    __tablename__ = "employees"

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    department_id: Mapped[int | None] = mapped_column(
        ForeignKey("departments.id"), nullable=True, index=True
    )
    employment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EmploymentStatus.ACTIVE.value
    )  # Active, OnLeave, Terminated, Suspended
    termination_date: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
