"""Tests for leave decisions and employee-status reconciliation."""
import random
from datetime import date, timedelta

import pytest
from sqlalchemy import select

from hr_portal.core.exceptions import ForbiddenError, ValidationError
from hr_portal.models.audit import AuditLog
from hr_portal.models.employee import Employee
from hr_portal.models.leave_request import LeaveStatus
from hr_portal.services.leave_reconciliation import (
    LeaveDecision,
    SimulatedManagerDecider,
    apply_leave_decision,
    decide_leave_request,
    decide_pending_leaves,
    sync_employee_statuses,
)

TODAY = date(2026, 3, 2)


class AlwaysApprove:
    def decide(self, leave, now):
        return LeaveDecision(LeaveStatus.APPROVED, "ok")


class NeverDecide:
    def decide(self, leave, now):
        return None


def _status(db, employee_id):
    return db.execute(select(Employee.employment_status).where(Employee.id == employee_id)).scalar_one()


# ─── Status sync ──────────────────────────────────────────────────────────────

def test_sync_moves_active_employee_on_leave(db, make_employee, make_leave):
    employee = make_employee()
    make_leave(employee=employee, status="Approved", start=TODAY, end=TODAY + timedelta(days=2))

    stats = sync_employee_statuses(db, TODAY)

    assert stats == {"to_active": 0, "to_on_leave": 1, "unchanged": 0}
    assert _status(db, employee.id) == "OnLeave"


def test_sync_returns_employee_to_active_after_leave(db, make_employee, make_leave):
    employee = make_employee(status="OnLeave")
    make_leave(employee=employee, status="Approved", start=TODAY - timedelta(days=5), end=TODAY - timedelta(days=1))

    stats = sync_employee_statuses(db, TODAY)

    assert stats["to_active"] == 1
    assert _status(db, employee.id) == "Active"
    actions = db.execute(select(AuditLog.action)).scalars().all()
    assert actions == ["employee.status_synced"]


def test_sync_ignores_pending_leave_and_other_statuses(db, make_employee, make_leave):
    pending = make_employee()
    make_leave(employee=pending, status="Pending", start=TODAY, end=TODAY)
    terminated = make_employee(status="Terminated")
    make_leave(employee=terminated, status="Approved", start=TODAY, end=TODAY)

    stats = sync_employee_statuses(db, TODAY)

    assert stats == {"to_active": 0, "to_on_leave": 0, "unchanged": 1}
    assert _status(db, pending.id) == "Active"
    assert _status(db, terminated.id) == "Terminated"


def test_sync_window_is_inclusive(db, make_employee, make_leave):
    employee = make_employee()
    make_leave(employee=employee, status="Approved", start=TODAY - timedelta(days=3), end=TODAY)

    sync_employee_statuses(db, TODAY)
    assert _status(db, employee.id) == "OnLeave"

    sync_employee_statuses(db, TODAY + timedelta(days=1))
    assert _status(db, employee.id) == "Active"


# ─── Decisions ────────────────────────────────────────────────────────────────

def test_decision_must_be_terminal():
    with pytest.raises(ValidationError):
        LeaveDecision(LeaveStatus.CANCELLED)
    with pytest.raises(ValidationError):
        LeaveDecision(LeaveStatus.PENDING)


def test_approval_covering_today_puts_employee_on_leave(db, clock, make_employee, make_leave):
    employee = make_employee()
    leave = make_leave(employee=employee)

    applied = apply_leave_decision(db, leave, LeaveDecision(LeaveStatus.APPROVED, "Enjoy"), clock())

    assert applied
    assert leave.status == "Approved"
    assert leave.decided_at == clock()
    assert leave.approver_comments == "Enjoy"
    assert _status(db, employee.id) == "OnLeave"


def test_future_approval_leaves_employee_active(db, clock, make_employee, make_leave):
    employee = make_employee()
    leave = make_leave(employee=employee, start=TODAY + timedelta(days=10), end=TODAY + timedelta(days=12))

    apply_leave_decision(db, leave, LeaveDecision(LeaveStatus.APPROVED), clock())

    assert _status(db, employee.id) == "Active"


def test_decided_leave_is_not_redecided(db, clock, make_leave):
    leave = make_leave()
    assert apply_leave_decision(db, leave, LeaveDecision(LeaveStatus.DECLINED), clock())
    assert not apply_leave_decision(db, leave, LeaveDecision(LeaveStatus.APPROVED), clock())
    assert leave.status == "Declined"


def test_decide_pending_leaves_counts(db, clock, make_leave):
    make_leave()
    make_leave()
    make_leave(status="Approved")

    assert decide_pending_leaves(db, AlwaysApprove(), clock()) == {"approved": 2, "declined": 0, "skipped": 0}
    assert decide_pending_leaves(db, AlwaysApprove(), clock()) == {"approved": 0, "declined": 0, "skipped": 0}


def test_decider_may_abstain(db, clock, make_leave):
    leave = make_leave()
    assert decide_pending_leaves(db, NeverDecide(), clock())["skipped"] == 1
    db.refresh(leave)
    assert leave.status == "Pending"


def test_simulated_decider_waits_then_decides(db, clock, make_leave):
    leave = make_leave(created_at=clock())
    decider = SimulatedManagerDecider(approval_rate=1.0, min_age_seconds=5, rng=random.Random(7))

    assert decider.decide(leave, clock() + timedelta(seconds=4)) is None
    decision = decider.decide(leave, clock() + timedelta(seconds=5))
    assert decision.status is LeaveStatus.APPROVED


def test_simulated_decider_respects_rate(db, clock, make_leave):
    leave = make_leave(created_at=clock() - timedelta(minutes=1))
    always_decline = SimulatedManagerDecider(approval_rate=0.0, rng=random.Random(1))
    assert always_decline.decide(leave, clock()).status is LeaveStatus.DECLINED

    seeded = SimulatedManagerDecider(approval_rate=0.7, rng=random.Random(42))
    outcomes = [seeded.decide(leave, clock()).status for _ in range(200)]
    approved = outcomes.count(LeaveStatus.APPROVED)
    assert 100 < approved < 180


# ─── Admin decision path ──────────────────────────────────────────────────────

def test_admin_decision_requires_edit_access(db, clock, make_leave):
    leave = make_leave(owner="admin-1")

    with pytest.raises(ForbiddenError):
        decide_leave_request(db, leave, LeaveDecision(LeaveStatus.APPROVED), "admin-2", clock=clock)

    decided = decide_leave_request(db, leave, LeaveDecision(LeaveStatus.DECLINED, "No cover"), "admin-1", clock=clock)
    assert decided.status == "Declined"
    log = db.execute(select(AuditLog).where(AuditLog.action == "leave_request.declined")).scalars().one()
    assert log.actor_admin_id == "admin-1"
