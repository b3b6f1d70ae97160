"""Pydantic schemas for access requests."""
from datetime import datetime

from pydantic import BaseModel, Field

from hr_portal.core.config import settings
from hr_portal.models.access_request import AccessRequest, ResourceType
from hr_portal.services.identifiers import encode, encode_access_request_id


class AccessRequestCreate(BaseModel):
    resource_type: str = Field(description="Department, Employee, Candidate, JobApplication or LeaveRequest")
    resource_id: str = Field(description="External id (e.g. 'E-15') or bare number")
    note: str | None = Field(default=None, max_length=500)


class AccessRequestDecision(BaseModel):
    allow_minutes: int | None = Field(
        default=None,
        le=settings.ACCESS_GRANT_MAX_MINUTES,
        description="Grant length; defaults to 15 minutes when absent or not positive",
    )


class AccessRequestOut(BaseModel):
    id: str
    resource_type: str
    resource_id: str
    owner_admin_id: str
    requester_admin_id: str
    status: str
    requested_at: datetime
    decided_at: datetime | None
    allowed_until: datetime | None
    note: str | None

    @classmethod
    def from_model(cls, request: AccessRequest) -> "AccessRequestOut":
        return cls(
            id=encode_access_request_id(request.id),
            resource_type=request.resource_type,
            resource_id=encode(ResourceType(request.resource_type), request.resource_id),
            owner_admin_id=request.owner_admin_id,
            requester_admin_id=request.requester_admin_id,
            status=request.status,
            requested_at=request.requested_at,
            decided_at=request.decided_at,
            allowed_until=request.allowed_until,
            note=request.note,
        )
