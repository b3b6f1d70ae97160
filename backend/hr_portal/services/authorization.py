"""Authorization gate consulted before every mutation of an owned resource.

Decision order:
  1. blank acting admin            -> Forbidden
  2. unowned resource              -> acting admin adopts it, Ok
  3. acting admin is the owner     -> Ok
  4. active access-request grant   -> Ok
  5. otherwise                     -> Forbidden

Delegations are not honoured unless a ``delegation_policy`` is supplied; see
``hr_portal.services.delegations.DelegatedAuthorityPolicy``.

Read/list operations never go through the gate; they use the ownership scope
filter instead.
"""
import enum
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import Select, false, func, or_, update
from sqlalchemy.orm import Session

from hr_portal.core.admin_identity import normalize_admin_id, same_admin
from hr_portal.core.clock import Clock, utc_now
from hr_portal.core.exceptions import ForbiddenError
from hr_portal.services import audit as audit_svc
from hr_portal.services.access_requests import find_active_approval
from hr_portal.services.resource_registry import ResourceRegistry, default_registry

logger = logging.getLogger(__name__)

DelegationPolicy = Callable[[Session, str, str, datetime], bool]


def ensure_edit_access(
    db: Session,
    resource: Any,
    acting_admin_id: str | None,
    *,
    registry: ResourceRegistry = default_registry,
    clock: Clock = utc_now,
    delegation_policy: DelegationPolicy | None = None,
) -> None:
    """Return normally when ``acting_admin_id`` may modify ``resource``; raise ForbiddenError otherwise.

    Adopting an unowned resource is persisted (committed) as a side effect.
    """
    acting = normalize_admin_id(acting_admin_id)
    if acting is None:
        raise ForbiddenError("Admin id is required")

    resource_type = registry.type_of(resource)

    if normalize_admin_id(resource.owner_admin_id) is None:
        if _adopt(db, resource, acting):
            audit_svc.log(
                db=db,
                action="ownership.adopted",
                entity_type=resource_type.value,
                entity_id=resource.id,
                actor_admin_id=acting,
                after={"owner_admin_id": acting},
            )
            db.commit()
            logger.info("Admin %s adopted unowned %s %s", acting, resource_type.value, resource.id)
            return
        # Lost the race to another adopter; fall through and judge against the new owner.

    owner = resource.owner_admin_id
    if same_admin(owner, acting):
        return

    now = clock()
    if find_active_approval(db, acting, resource_type, resource.id, now) is not None:
        return

    if delegation_policy is not None and delegation_policy(db, acting, owner, now):
        logger.info(
            "Admin %s acting on %s %s under delegation from %s",
            acting, resource_type.value, resource.id, owner,
        )
        return

    logger.info(
        "Edit denied: admin=%s resource=%s/%s owner=%s",
        acting, resource_type.value, resource.id, owner,
    )
    raise ForbiddenError("You do not have access to modify this resource")


def _adopt(db: Session, resource: Any, acting_admin_id: str) -> bool:
    """Claim ownership with a conditional UPDATE; True if this call set the owner."""
    model = type(resource)
    result = db.execute(
        update(model)
        .where(
            model.id == resource.id,
            or_(model.owner_admin_id.is_(None), func.trim(model.owner_admin_id) == ""),
        )
        .values(owner_admin_id=acting_admin_id)
        .execution_options(synchronize_session=False)
    )
    applied = result.rowcount == 1
    db.refresh(resource)
    return applied


# ─── Ownership scope for listings ───

class OwnershipScope(str, enum.Enum):
    ALL = "all"
    YOURS = "yours"


def parse_scope(raw: str | None) -> OwnershipScope:
    """'yours' (any case) narrows to the caller's resources; anything else means all."""
    if raw is not None and raw.strip().lower() == OwnershipScope.YOURS.value:
        return OwnershipScope.YOURS
    return OwnershipScope.ALL


def apply_scope(stmt: Select, model: type, scope: OwnershipScope, admin_id: str | None) -> Select:
    if scope is OwnershipScope.ALL:
        return stmt
    admin = normalize_admin_id(admin_id)
    if admin is None:
        return stmt.where(false())
    return stmt.where(func.lower(model.owner_admin_id) == admin.lower())
