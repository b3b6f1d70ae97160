"""Admin-to-admin authority delegation."""
import enum
from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from hr_portal.core.clock import utc_now
from hr_portal.db.base import Base, IntegerIDMixin, UTCDateTime


class DelegationStatus(str, enum.Enum):
    ACTIVE = "Active"
    REVOKED = "Revoked"


class AdminDelegation(Base, IntegerIDMixin):
    """Temporarily delegates one admin's authority to another."""

    __tablename__ = "admin_delegations"

    from_admin_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    to_admin_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    start_date: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    end_date: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DelegationStatus.ACTIVE.value
    )  # Active, Revoked; expiry is computed from end_date
    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utc_now)
    revoked_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    def is_effective(self, now: datetime) -> bool:
        return (
            self.status == DelegationStatus.ACTIVE.value
            and self.start_date <= now < self.end_date
        )
