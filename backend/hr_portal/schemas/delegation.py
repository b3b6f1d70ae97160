"""Pydantic schemas for admin delegations."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DelegationCreate(BaseModel):
    to_admin_id: str
    start_date: datetime
    end_date: datetime
    reason: str | None = Field(default=None, max_length=500)


class DelegationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    from_admin_id: str
    to_admin_id: str
    start_date: datetime
    end_date: datetime
    status: str
    reason: str | None
    created_at: datetime
    revoked_at: datetime | None
