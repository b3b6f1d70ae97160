"""Admin-to-admin delegation manager.

A delegation is effective while ``status == Active`` and
``start_date <= now < end_date``; expiry is computed, never stored.
"""
import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hr_portal.core.admin_identity import normalize_admin_id, same_admin
from hr_portal.core.clock import Clock, ensure_utc, utc_now
from hr_portal.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from hr_portal.models.delegation import AdminDelegation, DelegationStatus
from hr_portal.services import audit as audit_svc

logger = logging.getLogger(__name__)

ACTIVE = DelegationStatus.ACTIVE.value
REVOKED = DelegationStatus.REVOKED.value


def create_delegation(
    db: Session,
    from_admin_id: str | None,
    to_admin_id: str | None,
    start_date: datetime,
    end_date: datetime,
    reason: str | None = None,
    *,
    clock: Clock = utc_now,
) -> AdminDelegation:
    """Delegate ``from_admin_id``'s authority to ``to_admin_id`` for [start, end).

    Naive datetimes are taken as UTC.
    """
    delegator = normalize_admin_id(from_admin_id)
    if delegator is None:
        raise ValidationError("Admin ID is required")

    delegate = normalize_admin_id(to_admin_id)
    if delegate is None:
        raise ValidationError("Target admin ID is required")

    if same_admin(delegator, delegate):
        raise ValidationError("Cannot delegate to yourself")

    start, end = ensure_utc(start_date), ensure_utc(end_date)
    if end <= start:
        raise ValidationError("End date must be after start date")

    delegation = AdminDelegation(
        from_admin_id=delegator,
        to_admin_id=delegate,
        start_date=start,
        end_date=end,
        status=ACTIVE,
        reason=reason,
        created_at=clock(),
    )
    db.add(delegation)
    db.flush()

    audit_svc.log(
        db=db,
        action="delegation.created",
        entity_type="admin_delegation",
        entity_id=delegation.id,
        actor_admin_id=delegator,
        after={"to_admin_id": delegate, "start_date": start, "end_date": end},
        notes=reason,
    )
    db.commit()

    logger.info("Admin %s delegated authority to %s until %s", delegator, delegate, end.isoformat())
    return delegation


def revoke_delegation(
    db: Session,
    delegation_id: int,
    acting_admin_id: str | None,
    *,
    clock: Clock = utc_now,
) -> AdminDelegation:
    """Revoke a delegation. Only its creator may do so; revoking twice is a no-op."""
    delegation = db.get(AdminDelegation, delegation_id)
    if delegation is None:
        raise NotFoundError("Delegation not found")

    if not same_admin(delegation.from_admin_id, acting_admin_id):
        raise ForbiddenError("You can only revoke your own delegations")

    if delegation.status == REVOKED:
        return delegation

    delegation.status = REVOKED
    delegation.revoked_at = clock()
    audit_svc.log(
        db=db,
        action="delegation.revoked",
        entity_type="admin_delegation",
        entity_id=delegation.id,
        actor_admin_id=normalize_admin_id(acting_admin_id),
        before={"status": ACTIVE},
        after={"status": REVOKED, "revoked_at": delegation.revoked_at},
    )
    db.commit()

    logger.info("Admin %s revoked delegation %s", acting_admin_id, delegation_id)
    return delegation


def active_delegations_to(db: Session, admin_id: str | None, now: datetime) -> list[AdminDelegation]:
    admin = normalize_admin_id(admin_id)
    if admin is None:
        return []
    stmt = (
        select(AdminDelegation)
        .where(
            func.lower(AdminDelegation.to_admin_id) == admin.lower(),
            AdminDelegation.status == ACTIVE,
            AdminDelegation.start_date <= now,
            AdminDelegation.end_date > now,
        )
        .order_by(AdminDelegation.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def delegated_admin_ids(db: Session, admin_id: str | None, now: datetime) -> list[str]:
    """Distinct admins who currently delegate their authority to ``admin_id``."""
    seen: dict[str, str] = {}
    for delegation in active_delegations_to(db, admin_id, now):
        seen.setdefault(delegation.from_admin_id.casefold(), delegation.from_admin_id)
    return list(seen.values())


def my_delegations(db: Session, admin_id: str | None) -> list[AdminDelegation]:
    admin = normalize_admin_id(admin_id)
    if admin is None:
        return []
    stmt = (
        select(AdminDelegation)
        .where(func.lower(AdminDelegation.from_admin_id) == admin.lower())
        .order_by(AdminDelegation.created_at.desc(), AdminDelegation.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def delegations_to_me(db: Session, admin_id: str | None) -> list[AdminDelegation]:
    admin = normalize_admin_id(admin_id)
    if admin is None:
        return []
    stmt = (
        select(AdminDelegation)
        .where(func.lower(AdminDelegation.to_admin_id) == admin.lower())
        .order_by(AdminDelegation.created_at.desc(), AdminDelegation.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


class DelegatedAuthorityPolicy:
    """Treat an admin with an effective delegation from the owner as the owner.

    Plugs into ``ensure_edit_access(delegation_policy=...)``. Not consulted by
    default; enabled with ACCESS_HONOR_DELEGATIONS.
    """

    def __call__(self, db: Session, acting_admin_id: str, owner_admin_id: str, now: datetime) -> bool:
        return any(
            same_admin(delegation.from_admin_id, owner_admin_id)
            for delegation in active_delegations_to(db, acting_admin_id, now)
        )
