"""Pydantic schemas for the owned HR resources.

Only the fields the access-control layer and the reconciliation loops touch
are modelled here.
"""
from datetime import date, datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from hr_portal.models.access_request import ResourceType
from hr_portal.services.identifiers import encode


class _OwnedOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    RESOURCE_TYPE: ClassVar[ResourceType]

    id: int
    owner_admin_id: str | None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def external_id(self) -> str:
        return encode(self.RESOURCE_TYPE, self.id)


class _PartialUpdate(BaseModel):
    """PATCH body: omitted fields are left alone, explicit nulls are refused
    for columns that cannot be empty."""

    NON_NULLABLE: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_nulls(self):
        nulled = [f for f in self.NON_NULLABLE if f in self.model_fields_set and getattr(self, f) is None]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self


# ─── Departments ───

class DepartmentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None


class DepartmentUpdate(_PartialUpdate):
    NON_NULLABLE: ClassVar[tuple[str, ...]] = ("name",)

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None


class DepartmentOut(_OwnedOut):
    RESOURCE_TYPE: ClassVar[ResourceType] = ResourceType.DEPARTMENT

    name: str
    description: str | None


# ─── Employees ───

class EmployeeCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=100)
    department_id: int | None = None


class EmployeeUpdate(_PartialUpdate):
    NON_NULLABLE: ClassVar[tuple[str, ...]] = ("first_name", "last_name", "email")

    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    email: str | None = Field(default=None, min_length=3, max_length=100)
    department_id: int | None = None


class EmployeeOut(_OwnedOut):
    RESOURCE_TYPE: ClassVar[ResourceType] = ResourceType.EMPLOYEE

    first_name: str
    last_name: str
    email: str
    department_id: int | None
    employment_status: str
    termination_date: datetime | None


# ─── Candidates ───

class CandidateCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=100)


class CandidateUpdate(_PartialUpdate):
    NON_NULLABLE: ClassVar[tuple[str, ...]] = ("first_name", "last_name", "email")

    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    email: str | None = Field(default=None, min_length=3, max_length=100)


class CandidateOut(_OwnedOut):
    RESOURCE_TYPE: ClassVar[ResourceType] = ResourceType.CANDIDATE

    first_name: str
    last_name: str
    email: str


# ─── Job applications ───

class JobApplicationCreate(BaseModel):
    candidate_id: int
    position: str = Field(min_length=1, max_length=100)


class JobApplicationUpdate(_PartialUpdate):
    NON_NULLABLE: ClassVar[tuple[str, ...]] = ("position", "status")

    position: str | None = Field(default=None, min_length=1, max_length=100)
    status: str | None = Field(default=None, max_length=30)


class JobApplicationOut(_OwnedOut):
    RESOURCE_TYPE: ClassVar[ResourceType] = ResourceType.JOB_APPLICATION

    candidate_id: int
    position: str
    status: str


# ─── Leave requests ───

class LeaveRequestCreate(BaseModel):
    employee_id: int
    leave_type: str = Field(min_length=1, max_length=50)
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeaveRequestUpdate(_PartialUpdate):
    NON_NULLABLE: ClassVar[tuple[str, ...]] = ("leave_type",)

    leave_type: str | None = Field(default=None, min_length=1, max_length=50)
    reason: str | None = Field(default=None, max_length=500)


class LeaveDecisionIn(BaseModel):
    decision: str = Field(pattern="^(Approved|Declined)$")
    comments: str | None = Field(default=None, max_length=500)


class LeaveRequestOut(_OwnedOut):
    RESOURCE_TYPE: ClassVar[ResourceType] = ResourceType.LEAVE_REQUEST

    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    reason: str | None
    status: str
    approver_comments: str | None
    decided_at: datetime | None
