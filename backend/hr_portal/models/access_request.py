import enum
from datetime import datetime

from sqlalchemy import Index, Integer, String, func, text
from sqlalchemy.orm import Mapped, mapped_column

from hr_portal.db.base import Base, IntegerIDMixin, UTCDateTime


class ResourceType(str, enum.Enum):
    """Closed set of resource kinds the access-control core reasons about."""

    DEPARTMENT = "Department"
    EMPLOYEE = "Employee"
    CANDIDATE = "Candidate"
    JOB_APPLICATION = "JobApplication"
    LEAVE_REQUEST = "LeaveRequest"


class AccessRequestStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"


class AccessRequest(Base, IntegerIDMixin):
    """One admin's request for time-boxed modify rights over another admin's resource."""

    __tablename__ = "access_requests"
    __table_args__ = (
        Index("ix_access_requests_grant_lookup", "requester_admin_id", "resource_type", "resource_id", "status"),
    )

    resource_type: Mapped[str] = mapped_column(String(50), nullable=False)
    resource_id: Mapped[int] = mapped_column(Integer, nullable=False)
    owner_admin_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    requester_admin_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccessRequestStatus.PENDING.value
    )  # Pending, Approved, Denied
    requested_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    decided_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    allowed_until: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def is_active_grant(self, now: datetime) -> bool:
        return (
            self.status == AccessRequestStatus.APPROVED.value
            and self.allowed_until is not None
            and self.allowed_until > now
        )


# At most one Pending request per (requester, type, id); requester ids compare case-insensitively
Index(
    "uq_access_requests_pending_triple",
    func.lower(AccessRequest.requester_admin_id),
    AccessRequest.resource_type,
    AccessRequest.resource_id,
    unique=True,
    postgresql_where=text("status = 'Pending'"),
    sqlite_where=text("status = 'Pending'"),
)
