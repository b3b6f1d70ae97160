"""Tests for the authorization gate and the ownership scope filter."""
from datetime import timedelta

import pytest
from sqlalchemy import select, update

from hr_portal.core.exceptions import ForbiddenError
from hr_portal.models.access_request import ResourceType
from hr_portal.models.audit import AuditLog
from hr_portal.models.employee import Employee
from hr_portal.services import access_requests as access_svc
from hr_portal.services import delegations as delegation_svc
from hr_portal.services.authorization import (
    OwnershipScope,
    apply_scope,
    ensure_edit_access,
    parse_scope,
)
from hr_portal.services.delegations import DelegatedAuthorityPolicy


# ─── Gate ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("resource_type", list(ResourceType))
def test_owner_may_edit(db, clock, make_resource, resource_type):
    resource = make_resource(resource_type, owner="admin-1")
    ensure_edit_access(db, resource, "admin-1", clock=clock)
    ensure_edit_access(db, resource, " ADMIN-1 ", clock=clock)


@pytest.mark.parametrize("resource_type", list(ResourceType))
def test_non_owner_is_forbidden(db, clock, make_resource, resource_type):
    resource = make_resource(resource_type, owner="admin-1")
    with pytest.raises(ForbiddenError, match="do not have access"):
        ensure_edit_access(db, resource, "admin-2", clock=clock)


def test_blank_admin_is_forbidden_even_for_unowned(db, clock, make_employee):
    employee = make_employee(owner=None)
    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "   ", clock=clock)
    db.refresh(employee)
    assert employee.owner_admin_id is None


@pytest.mark.parametrize("blank_owner", [None, "", "   "])
def test_unowned_resource_is_adopted(db, clock, make_employee, blank_owner):
    employee = make_employee(owner=blank_owner)

    ensure_edit_access(db, employee, "admin-2", clock=clock)

    assert employee.owner_admin_id == "admin-2"
    stored = db.execute(select(Employee.owner_admin_id).where(Employee.id == employee.id)).scalar_one()
    assert stored == "admin-2"
    log = db.execute(select(AuditLog).where(AuditLog.action == "ownership.adopted")).scalars().one()
    assert log.actor_admin_id == "admin-2"

    # The adopter is now the owner; everyone else needs a grant
    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "admin-3", clock=clock)


def test_active_grant_allows_edit(db, clock, make_employee):
    employee = make_employee(owner="admin-1")
    request = access_svc.create_access_request(db, "admin-2", "Employee", str(employee.id), clock=clock)

    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "admin-2", clock=clock)

    access_svc.approve_access_request(db, request.id, "admin-1", clock=clock)
    ensure_edit_access(db, employee, "admin-2", clock=clock)

    # Grants are per requester
    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "admin-3", clock=clock)


def test_denied_request_grants_nothing(db, clock, make_employee):
    employee = make_employee(owner="admin-1")
    request = access_svc.create_access_request(db, "admin-2", "Employee", str(employee.id), clock=clock)
    access_svc.deny_access_request(db, request.id, "admin-1", clock=clock)

    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "admin-2", clock=clock)


def test_grant_is_exclusive_at_expiry_instant(db, clock, make_employee):
    employee = make_employee(owner="admin-1")
    request = access_svc.create_access_request(db, "admin-2", "Employee", str(employee.id), clock=clock)
    access_svc.approve_access_request(db, request.id, "admin-1", allow_minutes=15, clock=clock)

    clock.advance(minutes=15)
    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "admin-2", clock=clock)


# ─── Delegations and the gate ─────────────────────────────────────────────────

def test_delegation_not_honoured_by_default(db, clock, make_employee):
    employee = make_employee(owner="admin-1")
    delegation_svc.create_delegation(
        db, "admin-1", "admin-2", clock() - timedelta(days=1), clock() + timedelta(days=1), clock=clock
    )

    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "admin-2", clock=clock)


def test_delegation_policy_when_supplied(db, clock, make_employee):
    employee = make_employee(owner="admin-1")
    delegation = delegation_svc.create_delegation(
        db, "admin-1", "admin-2", clock() - timedelta(days=1), clock() + timedelta(days=1), clock=clock
    )
    policy = DelegatedAuthorityPolicy()

    ensure_edit_access(db, employee, "admin-2", clock=clock, delegation_policy=policy)
    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "admin-3", clock=clock, delegation_policy=policy)

    delegation_svc.revoke_delegation(db, delegation.id, "admin-1", clock=clock)
    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "admin-2", clock=clock, delegation_policy=policy)


# ─── Scope ────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "raw, expected",
    [
        ("yours", OwnershipScope.YOURS),
        (" YOURS ", OwnershipScope.YOURS),
        ("all", OwnershipScope.ALL),
        (None, OwnershipScope.ALL),
        ("mine", OwnershipScope.ALL),
    ],
)
def test_parse_scope(raw, expected):
    assert parse_scope(raw) is expected


def test_apply_scope_filters_by_owner(db, make_employee):
    mine = make_employee(owner="admin-1")
    make_employee(owner="admin-2")
    make_employee(owner=None)

    def ids(scope, admin):
        stmt = apply_scope(select(Employee).order_by(Employee.id), Employee, scope, admin)
        return [e.id for e in db.execute(stmt).scalars().all()]

    assert ids(OwnershipScope.YOURS, "Admin-1") == [mine.id]
    assert len(ids(OwnershipScope.ALL, "admin-1")) == 3
    assert ids(OwnershipScope.YOURS, None) == []
    assert ids(OwnershipScope.YOURS, "  ") == []


def test_lost_adoption_race_is_judged_against_new_owner(db, clock, make_employee):
    employee = make_employee(owner=None)

    # Another admin adopts the row after this session loaded it
    db.execute(
        update(Employee)
        .where(Employee.id == employee.id)
        .values(owner_admin_id="admin-3")
        .execution_options(synchronize_session=False)
    )
    db.commit()
    assert employee.owner_admin_id is None

    with pytest.raises(ForbiddenError):
        ensure_edit_access(db, employee, "admin-2", clock=clock)
    assert employee.owner_admin_id == "admin-3"
    assert db.execute(select(AuditLog).where(AuditLog.action == "ownership.adopted")).scalars().all() == []
