"""Pydantic schemas for audit log entries."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    actor_admin_id: str | None
    action: str
    entity_type: str
    entity_id: int | None
    before_state: str | None
    after_state: str | None
    notes: str | None
    created_at: datetime
