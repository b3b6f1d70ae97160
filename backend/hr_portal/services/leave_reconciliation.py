"""Leave decisions and employee-status reconciliation.

Both background passes read a snapshot first, then re-fetch and mutate one
row at a time, committing per row. Interrupting a pass between rows leaves
every committed row consistent with its own leave window.
"""
import logging
import random
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from hr_portal.core.clock import Clock, utc_now
from hr_portal.core.exceptions import ValidationError
from hr_portal.models.employee import Employee, EmploymentStatus
from hr_portal.models.leave_request import LeaveRequest, LeaveStatus
from hr_portal.services import audit as audit_svc

logger = logging.getLogger(__name__)

APPROVED_COMMENT = "Request approved by manager"
DECLINED_COMMENT = "Request declined by manager - insufficient leave balance or scheduling conflict"


# ─── Decision interface ───

@dataclass(frozen=True)
class LeaveDecision:
    status: LeaveStatus
    comments: str | None = None

    def __post_init__(self):
        if self.status not in (LeaveStatus.APPROVED, LeaveStatus.DECLINED):
            raise ValidationError("Decision must be Approved or Declined")


class LeaveDecider(Protocol):
    def decide(self, leave: LeaveRequest, now: datetime) -> LeaveDecision | None:
        """Return a decision, or None to leave the request Pending for now."""


class SimulatedManagerDecider:
    """Stand-in for a human manager: approves a fixed share of requests at random.

    Requests younger than ``min_age_seconds`` are left alone to mimic a
    decision delay.
    """

    def __init__(
        self,
        approval_rate: float = 0.7,
        min_age_seconds: int = 5,
        rng: random.Random | None = None,
    ):
        self.approval_rate = approval_rate
        self.min_age_seconds = min_age_seconds
        self._rng = rng or random.Random()

    def decide(self, leave: LeaveRequest, now: datetime) -> LeaveDecision | None:
        if (now - leave.created_at).total_seconds() < self.min_age_seconds:
            return None
        if self._rng.random() < self.approval_rate:
            return LeaveDecision(LeaveStatus.APPROVED, APPROVED_COMMENT)
        return LeaveDecision(LeaveStatus.DECLINED, DECLINED_COMMENT)


# ─── Applying a decision ───

def apply_leave_decision(
    db: Session,
    leave: LeaveRequest,
    decision: LeaveDecision,
    now: datetime,
    actor_admin_id: str | None = None,
) -> bool:
    """Decide a Pending leave request; False if it was no longer Pending.

    An approval covering today also moves an Active employee to OnLeave.
    """
    db.refresh(leave)
    if leave.status != LeaveStatus.PENDING.value:
        return False

    leave.status = decision.status.value
    leave.decided_at = now
    leave.approver_comments = decision.comments

    if decision.status is LeaveStatus.APPROVED and leave.covers(now.date()):
        employee = db.get(Employee, leave.employee_id)
        if employee is not None and employee.employment_status == EmploymentStatus.ACTIVE.value:
            employee.employment_status = EmploymentStatus.ON_LEAVE.value
            logger.info(
                "Employee %s status changed to OnLeave (approved leave request %s)",
                employee.id, leave.id,
            )

    audit_svc.log(
        db=db,
        action=f"leave_request.{decision.status.value.lower()}",
        entity_type="LeaveRequest",
        entity_id=leave.id,
        actor_admin_id=actor_admin_id,
        before={"status": LeaveStatus.PENDING.value},
        after={"status": leave.status, "decided_at": now},
        notes=decision.comments,
    )
    db.commit()

    logger.info(
        "Leave request %s for employee %s has been %s%s",
        leave.id, leave.employee_id, leave.status,
        "" if actor_admin_id else " (simulated)",
    )
    return True


def decide_pending_leaves(db: Session, decider: LeaveDecider, now: datetime) -> dict:
    """Offer every Pending leave request to ``decider``; one commit per decided row."""
    stats = {"approved": 0, "declined": 0, "skipped": 0}

    pending_ids = db.execute(
        select(LeaveRequest.id)
        .where(LeaveRequest.status == LeaveStatus.PENDING.value)
        .order_by(LeaveRequest.id.asc())
    ).scalars().all()

    for leave_id in pending_ids:
        leave = db.get(LeaveRequest, leave_id, populate_existing=True)
        if leave is None or leave.status != LeaveStatus.PENDING.value:
            stats["skipped"] += 1
            continue

        decision = decider.decide(leave, now)
        if decision is None:
            stats["skipped"] += 1
            continue

        if apply_leave_decision(db, leave, decision, now):
            key = "approved" if decision.status is LeaveStatus.APPROVED else "declined"
            stats[key] += 1
        else:
            stats["skipped"] += 1

    return stats


# ─── Employee status sync ───

def find_active_approved_leave(db: Session, employee_id: int, day: date) -> LeaveRequest | None:
    return db.execute(
        select(LeaveRequest)
        .where(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.status == LeaveStatus.APPROVED.value,
            LeaveRequest.start_date <= day,
            LeaveRequest.end_date >= day,
        )
        .limit(1)
    ).scalars().first()


def sync_employee_statuses(db: Session, today: date) -> dict:
    """Align Active/OnLeave employee statuses with approved leave windows covering ``today``."""
    stats = {"to_active": 0, "to_on_leave": 0, "unchanged": 0}

    snapshot = db.execute(
        select(Employee.id, Employee.employment_status).where(
            Employee.employment_status.in_(
                [EmploymentStatus.ON_LEAVE.value, EmploymentStatus.ACTIVE.value]
            )
        )
    ).all()

    for employee_id, status in snapshot:
        on_leave = find_active_approved_leave(db, employee_id, today) is not None
        target = EmploymentStatus.ON_LEAVE.value if on_leave else EmploymentStatus.ACTIVE.value
        if status == target:
            stats["unchanged"] += 1
            continue

        employee = db.get(Employee, employee_id, populate_existing=True)
        if employee is None or employee.employment_status != status:
            stats["unchanged"] += 1
            continue

        employee.employment_status = target
        audit_svc.log(
            db=db,
            action="employee.status_synced",
            entity_type="Employee",
            entity_id=employee.id,
            before={"employment_status": status},
            after={"employment_status": target},
        )
        db.commit()

        if on_leave:
            stats["to_on_leave"] += 1
            logger.info("Employee %s status changed to OnLeave (active leave found)", employee_id)
        else:
            stats["to_active"] += 1
            logger.info("Employee %s status reset to Active (leave period ended)", employee_id)

    logger.debug("Employee status sync completed: %s", stats)
    return stats


def decide_leave_request(
    db: Session,
    leave: LeaveRequest,
    decision: LeaveDecision,
    actor_admin_id: str,
    *,
    clock: Clock = utc_now,
) -> LeaveRequest:
    """Record an admin's decision after the edit-access check.

    A no-op when the request is no longer Pending.
    """
    from hr_portal.services.resources import authorize_edit

    authorize_edit(db, leave, actor_admin_id, clock=clock)
    apply_leave_decision(db, leave, decision, clock(), actor_admin_id=actor_admin_id)
    return leave
