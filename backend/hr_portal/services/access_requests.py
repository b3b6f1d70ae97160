"""Access request workflow.

State machine: Pending -> Approved | Denied (both terminal). An Approved
request is a grant honoured by the authorization gate until ``allowed_until``.

All functions accept a sync SQLAlchemy Session and an injectable clock.
"""
import logging
from datetime import datetime, timedelta

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hr_portal.core.admin_identity import normalize_admin_id, same_admin
from hr_portal.core.clock import Clock, utc_now
from hr_portal.core.config import settings
from hr_portal.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from hr_portal.models.access_request import AccessRequest, AccessRequestStatus, ResourceType
from hr_portal.services import audit as audit_svc
from hr_portal.services.identifiers import parse_resource_id, parse_resource_type
from hr_portal.services.resource_registry import ResourceRegistry, default_registry

logger = logging.getLogger(__name__)

PENDING = AccessRequestStatus.PENDING.value
APPROVED = AccessRequestStatus.APPROVED.value
DENIED = AccessRequestStatus.DENIED.value


# ─── Lookups ───

def get_access_request(db: Session, request_id: int) -> AccessRequest:
    request = db.get(AccessRequest, request_id)
    if request is None:
        raise NotFoundError("Access request not found")
    return request


def _triple_filter(requester_admin_id: str, resource_type: ResourceType, resource_id: int) -> list:
    return [
        func.lower(AccessRequest.requester_admin_id) == requester_admin_id.strip().lower(),
        AccessRequest.resource_type == resource_type.value,
        AccessRequest.resource_id == resource_id,
    ]


def find_active_approval(
    db: Session,
    requester_admin_id: str,
    resource_type: ResourceType,
    resource_id: int,
    now: datetime,
) -> AccessRequest | None:
    """Most recent Approved request for the triple whose grant has not expired."""
    stmt = (
        select(AccessRequest)
        .where(
            *_triple_filter(requester_admin_id, resource_type, resource_id),
            AccessRequest.status == APPROVED,
            AccessRequest.allowed_until.is_not(None),
            AccessRequest.allowed_until > now,
        )
        .order_by(AccessRequest.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def find_pending(
    db: Session,
    requester_admin_id: str,
    resource_type: ResourceType,
    resource_id: int,
) -> AccessRequest | None:
    stmt = (
        select(AccessRequest)
        .where(
            *_triple_filter(requester_admin_id, resource_type, resource_id),
            AccessRequest.status == PENDING,
        )
        .order_by(AccessRequest.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def get_inbox(db: Session, owner_admin_id: str | None) -> list[AccessRequest]:
    """Requests addressed to the owner, most recent first."""
    owner = normalize_admin_id(owner_admin_id)
    if owner is None:
        return []
    stmt = (
        select(AccessRequest)
        .where(func.lower(AccessRequest.owner_admin_id) == owner.lower())
        .order_by(AccessRequest.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def get_outbox(db: Session, requester_admin_id: str | None) -> list[AccessRequest]:
    """Requests the admin has sent, most recent first."""
    requester = normalize_admin_id(requester_admin_id)
    if requester is None:
        return []
    stmt = (
        select(AccessRequest)
        .where(func.lower(AccessRequest.requester_admin_id) == requester.lower())
        .order_by(AccessRequest.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


# ─── Create ───

def create_access_request(
    db: Session,
    requester_admin_id: str | None,
    resource_type: str | None,
    resource_id: str | int | None,
    note: str | None = None,
    *,
    registry: ResourceRegistry = default_registry,
    clock: Clock = utc_now,
) -> AccessRequest:
    """Ask the resource's owner for temporary modify rights.

    Idempotent: an active grant or an outstanding Pending request for the same
    (requester, type, id) is returned as-is instead of creating a new row.

    Raises:
        ValidationError: blank input, unowned resource, or requester already owns it.
        NotFoundError: unknown resource type or id.
    """
    requester = normalize_admin_id(requester_admin_id)
    if requester is None:
        raise ValidationError("Requester admin id is required")

    if not (resource_type or "").strip() or resource_id is None or not str(resource_id).strip():
        raise ValidationError("Resource type and resource id are required")

    rtype = parse_resource_type(resource_type)
    if rtype is None:
        raise NotFoundError("Resource not found")
    numeric_id = parse_resource_id(rtype, resource_id)

    owner = registry.resolve_owner(db, rtype, numeric_id)
    if owner is None:
        raise ValidationError("Owner admin is not assigned for this resource")

    if same_admin(owner, requester):
        raise ValidationError("You already own this resource")

    now = clock()

    existing = find_active_approval(db, requester, rtype, numeric_id, now)
    if existing is not None:
        return existing

    existing = find_pending(db, requester, rtype, numeric_id)
    if existing is not None:
        return existing

    request = AccessRequest(
        resource_type=rtype.value,
        resource_id=numeric_id,
        owner_admin_id=owner,
        requester_admin_id=requester,
        status=PENDING,
        requested_at=now,
        note=note,
    )
    db.add(request)
    try:
        db.flush()
    except IntegrityError:
        # A concurrent call inserted the Pending row first.
        db.rollback()
        existing = find_pending(db, requester, rtype, numeric_id)
        if existing is None:
            raise
        return existing

    audit_svc.log(
        db=db,
        action="access_request.created",
        entity_type="access_request",
        entity_id=request.id,
        actor_admin_id=requester,
        after={
            "resource_type": rtype.value,
            "resource_id": numeric_id,
            "owner_admin_id": owner,
            "status": PENDING,
        },
        notes=note,
    )
    db.commit()

    logger.info(
        "Access request %s created: requester=%s resource=%s/%s owner=%s",
        request.id, requester, rtype.value, numeric_id, owner,
    )
    return request


# ─── Decide ───

def approve_access_request(
    db: Session,
    request_id: int,
    acting_admin_id: str | None,
    allow_minutes: int | None = None,
    *,
    clock: Clock = utc_now,
) -> AccessRequest:
    """Approve a Pending request, granting access for ``allow_minutes``.

    ``allow_minutes`` falls back to ACCESS_GRANT_DEFAULT_MINUTES when absent or
    not positive and may not exceed ACCESS_GRANT_MAX_MINUTES. Approving an
    already decided request returns it unchanged.
    """
    request = get_access_request(db, request_id)
    if not same_admin(request.owner_admin_id, acting_admin_id):
        raise ForbiddenError("Only the owner admin can approve this request")

    if request.status != PENDING:
        return request

    minutes = allow_minutes if allow_minutes and allow_minutes > 0 else settings.ACCESS_GRANT_DEFAULT_MINUTES
    if minutes > settings.ACCESS_GRANT_MAX_MINUTES:
        raise ValidationError(f"Access can be granted for at most {settings.ACCESS_GRANT_MAX_MINUTES} minutes")
    now = clock()
    applied = _decide(
        db,
        request,
        APPROVED,
        actor_admin_id=normalize_admin_id(acting_admin_id),
        decided_at=now,
        allowed_until=now + timedelta(minutes=minutes),
    )
    if applied:
        logger.info(
            "Access request %s approved by %s for %d minutes (until %s)",
            request.id, acting_admin_id, minutes, request.allowed_until.isoformat(),
        )
    return request


def deny_access_request(
    db: Session,
    request_id: int,
    acting_admin_id: str | None,
    *,
    clock: Clock = utc_now,
) -> AccessRequest:
    """Deny a Pending request. Denying an already decided request returns it unchanged."""
    request = get_access_request(db, request_id)
    if not same_admin(request.owner_admin_id, acting_admin_id):
        raise ForbiddenError("Only the owner admin can deny this request")

    if request.status != PENDING:
        return request

    applied = _decide(
        db,
        request,
        DENIED,
        actor_admin_id=normalize_admin_id(acting_admin_id),
        decided_at=clock(),
        allowed_until=None,
    )
    if applied:
        logger.info("Access request %s denied by %s", request.id, acting_admin_id)
    return request


def _decide(
    db: Session,
    request: AccessRequest,
    status: str,
    actor_admin_id: str | None,
    decided_at: datetime,
    allowed_until: datetime | None,
) -> bool:
    """Move a request out of Pending with a single conditional UPDATE.

    Returns False when another caller decided it first; ``request`` is
    refreshed either way so the caller sees the stored outcome.
    """
    result = db.execute(
        update(AccessRequest)
        .where(AccessRequest.id == request.id, AccessRequest.status == PENDING)
        .values(status=status, decided_at=decided_at, allowed_until=allowed_until)
        .execution_options(synchronize_session=False)
    )
    applied = result.rowcount == 1

    if applied:
        audit_svc.log(
            db=db,
            action=f"access_request.{status.lower()}",
            entity_type="access_request",
            entity_id=request.id,
            actor_admin_id=actor_admin_id,
            before={"status": PENDING},
            after={"status": status, "decided_at": decided_at, "allowed_until": allowed_until},
        )
    else:
        logger.info("Access request %s was already decided; leaving it unchanged", request.id)

    db.commit()
    db.refresh(request)
    return applied
