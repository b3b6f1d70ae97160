"""Tests for the admin delegation manager."""
from datetime import datetime, timedelta

import pytest

from hr_portal.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from hr_portal.services import delegations as delegation_svc


def _delegate(db, clock, from_admin="admin-1", to_admin="admin-2", start_offset=-1, days=7, **kw):
    start = clock() + timedelta(days=start_offset)
    return delegation_svc.create_delegation(
        db, from_admin, to_admin, start, start + timedelta(days=days), clock=clock, **kw
    )


def test_create_delegation(db, clock):
    delegation = _delegate(db, clock, reason="Annual leave cover")

    assert delegation.id is not None
    assert delegation.status == "Active"
    assert delegation.from_admin_id == "admin-1"
    assert delegation.to_admin_id == "admin-2"
    assert delegation.created_at == clock()
    assert delegation.revoked_at is None
    assert delegation.is_effective(clock())


@pytest.mark.parametrize(
    "from_admin, to_admin, message",
    [
        ("  ", "admin-2", "Admin ID is required"),
        ("admin-1", None, "Target admin ID is required"),
        ("admin-1", " ADMIN-1 ", "Cannot delegate to yourself"),
    ],
)
def test_create_rejects_bad_admins(db, clock, from_admin, to_admin, message):
    with pytest.raises(ValidationError, match=message):
        _delegate(db, clock, from_admin=from_admin, to_admin=to_admin)


@pytest.mark.parametrize("days", [0, -1])
def test_create_rejects_empty_or_inverted_range(db, clock, days):
    with pytest.raises(ValidationError, match="End date must be after start date"):
        _delegate(db, clock, days=days)


def test_naive_dates_are_taken_as_utc(db, clock):
    delegation = delegation_svc.create_delegation(
        db, "admin-1", "admin-2", datetime(2026, 3, 1), datetime(2026, 3, 10), clock=clock
    )
    assert delegation.start_date.utcoffset() == timedelta(0)
    assert delegation.is_effective(clock())


def test_revoke_only_by_creator(db, clock):
    delegation = _delegate(db, clock)

    with pytest.raises(ForbiddenError, match="only revoke your own"):
        delegation_svc.revoke_delegation(db, delegation.id, "admin-3", clock=clock)
    with pytest.raises(ForbiddenError):
        delegation_svc.revoke_delegation(db, delegation.id, "admin-2", clock=clock)

    clock.advance(hours=1)
    revoked = delegation_svc.revoke_delegation(db, delegation.id, "Admin-1", clock=clock)
    assert revoked.status == "Revoked"
    assert revoked.revoked_at == clock()


def test_revoke_twice_is_a_no_op(db, clock):
    delegation = _delegate(db, clock)
    first = delegation_svc.revoke_delegation(db, delegation.id, "admin-1", clock=clock)
    revoked_at = first.revoked_at

    clock.advance(hours=2)
    second = delegation_svc.revoke_delegation(db, delegation.id, "admin-1", clock=clock)
    assert second.status == "Revoked"
    assert second.revoked_at == revoked_at


def test_revoke_unknown(db, clock):
    with pytest.raises(NotFoundError, match="Delegation not found"):
        delegation_svc.revoke_delegation(db, 123, "admin-1", clock=clock)


def test_effective_window_is_half_open(db, clock):
    delegation = _delegate(db, clock, start_offset=0, days=1)
    start, end = delegation.start_date, delegation.end_date

    assert delegation.is_effective(start)
    assert not delegation.is_effective(start - timedelta(seconds=1))
    assert not delegation.is_effective(end)

    assert delegation_svc.active_delegations_to(db, "admin-2", start) == [delegation]
    assert delegation_svc.active_delegations_to(db, "admin-2", end) == []


def test_delegated_admin_ids(db, clock):
    _delegate(db, clock, from_admin="admin-1")
    _delegate(db, clock, from_admin="ADMIN-1")
    _delegate(db, clock, from_admin="admin-3")
    _delegate(db, clock, from_admin="admin-4", start_offset=3)  # not started yet
    revoked = _delegate(db, clock, from_admin="admin-5")
    delegation_svc.revoke_delegation(db, revoked.id, "admin-5", clock=clock)

    ids = delegation_svc.delegated_admin_ids(db, "Admin-2", clock())
    assert sorted(i.lower() for i in ids) == ["admin-1", "admin-3"]
    assert delegation_svc.delegated_admin_ids(db, "admin-9", clock()) == []
    assert delegation_svc.delegated_admin_ids(db, None, clock()) == []


def test_listings(db, clock):
    outgoing = _delegate(db, clock, from_admin="admin-1", to_admin="admin-2")
    incoming = _delegate(db, clock, from_admin="admin-3", to_admin="admin-1")

    assert delegation_svc.my_delegations(db, "admin-1") == [outgoing]
    assert delegation_svc.delegations_to_me(db, "admin-1") == [incoming]
    assert delegation_svc.my_delegations(db, "") == []
