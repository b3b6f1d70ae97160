"""Leave request API endpoints.

  POST /leave-requests/{id}/decision records a manager decision through the
  same path the simulated background decider uses.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hr_portal.core.clock import Clock
from hr_portal.core.deps import get_admin_id, get_clock
from hr_portal.core.exceptions import ValidationError
from hr_portal.db.session import get_session
from hr_portal.models.access_request import ResourceType
from hr_portal.models.employee import Employee
from hr_portal.models.leave_request import LeaveRequest, LeaveStatus
from hr_portal.schemas.hr import (
    LeaveDecisionIn,
    LeaveRequestCreate,
    LeaveRequestOut,
    LeaveRequestUpdate,
)
from hr_portal.services import resources as resource_svc
from hr_portal.services.authorization import parse_scope
from hr_portal.services.identifiers import parse_resource_id
from hr_portal.services.leave_reconciliation import LeaveDecision, decide_leave_request

router = APIRouter()


def _load(db: Session, leave_id: str) -> LeaveRequest:
    return resource_svc.get_or_404(
        db, LeaveRequest, parse_resource_id(ResourceType.LEAVE_REQUEST, leave_id), "Leave request"
    )


@router.get("", response_model=list[LeaveRequestOut], summary="List leave requests")
def list_leave_requests(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    scope: Annotated[str | None, Query(description="'yours' for requests you own, otherwise all")] = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
):
    filters = [LeaveRequest.status == status_filter] if status_filter else []
    leaves = resource_svc.list_owned(db, LeaveRequest, parse_scope(scope), admin_id, *filters)
    return [LeaveRequestOut.model_validate(lr) for lr in leaves]


@router.get("/{leave_id}", response_model=LeaveRequestOut, summary="Get a leave request")
def get_leave_request(leave_id: str, db: Annotated[Session, Depends(get_session)]):
    return LeaveRequestOut.model_validate(_load(db, leave_id))


@router.post(
    "", response_model=LeaveRequestOut, status_code=status.HTTP_201_CREATED, summary="Submit a leave request"
)
def create_leave_request(
    body: LeaveRequestCreate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
):
    if db.get(Employee, body.employee_id) is None:
        raise ValidationError("Employee not found")
    leave = LeaveRequest(**body.model_dump(), status=LeaveStatus.PENDING.value)
    leave = resource_svc.create_owned(db, leave, admin_id)
    return LeaveRequestOut.model_validate(leave)


@router.patch("/{leave_id}", response_model=LeaveRequestOut, summary="Update a leave request")
def update_leave_request(
    leave_id: str,
    body: LeaveRequestUpdate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    leave = resource_svc.update_owned(
        db, _load(db, leave_id), body.model_dump(exclude_unset=True), admin_id, clock=clock
    )
    return LeaveRequestOut.model_validate(leave)


@router.post("/{leave_id}/decision", response_model=LeaveRequestOut, summary="Approve or decline a leave request")
def decide_leave(
    leave_id: str,
    body: LeaveDecisionIn,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    decision = LeaveDecision(LeaveStatus(body.decision), body.comments)
    leave = decide_leave_request(db, _load(db, leave_id), decision, admin_id, clock=clock)
    return LeaveRequestOut.model_validate(leave)


@router.delete("/{leave_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a leave request")
def delete_leave_request(
    leave_id: str,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    resource_svc.delete_owned(db, _load(db, leave_id), admin_id, clock=clock)
