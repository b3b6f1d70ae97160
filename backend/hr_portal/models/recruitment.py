"""Candidates and their job applications."""
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from hr_portal.db.base import Base, IntegerIDMixin, OwnedMixin, TimestampMixin


class Candidate(Base, IntegerIDMixin, TimestampMixin, OwnedMixin):
    __tablename__ = "candidates"

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, index=True)


class JobApplication(Base, IntegerIDMixin, TimestampMixin, OwnedMixin):
    __tablename__ = "job_applications"

    candidate_id: Mapped[int] = mapped_column(ForeignKey("candidates.id"), nullable=False, index=True)
    position: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default="Applied"
    )  # Applied, UnderReview, Shortlisted, Interview, Offered, Rejected, Hired, Withdrawn
