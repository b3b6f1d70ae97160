from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hr_portal.db.base import Base, IntegerIDMixin, TimestampMixin


class AuditLog(Base, IntegerIDMixin, TimestampMixin):
    """Append-only trail of ownership, grant, delegation and leave transitions."""

    __tablename__ = "audit_logs"

    actor_admin_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)  # null = system
    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    entity_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    before_state: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON snapshot
    after_state: Mapped[str | None] = mapped_column(Text, nullable=True)   # JSON snapshot
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
