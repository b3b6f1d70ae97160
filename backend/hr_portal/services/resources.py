"""Thin CRUD over owned resources.

Every mutation runs the authorization gate first; listings use the
ownership scope filter. Field-level validation lives in the request schemas.
"""
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from hr_portal.core.admin_identity import normalize_admin_id
from hr_portal.core.clock import Clock, utc_now
from hr_portal.core.config import settings
from hr_portal.core.exceptions import NotFoundError
from hr_portal.services.authorization import (
    OwnershipScope,
    apply_scope,
    ensure_edit_access,
)
from hr_portal.services.delegations import DelegatedAuthorityPolicy
from hr_portal.services.resource_registry import ResourceRegistry, default_registry

logger = logging.getLogger(__name__)


def _delegation_policy():
    return DelegatedAuthorityPolicy() if settings.ACCESS_HONOR_DELEGATIONS else None


def list_owned(
    db: Session,
    model: type,
    scope: OwnershipScope,
    admin_id: str | None,
    *filters: Any,
) -> list:
    stmt = select(model).where(*filters).order_by(model.id.asc())
    stmt = apply_scope(stmt, model, scope, admin_id)
    return list(db.execute(stmt).scalars().all())


def get_or_404(db: Session, model: type, resource_id: int, label: str | None = None) -> Any:
    resource = db.get(model, resource_id)
    if resource is None:
        raise NotFoundError(f"{label or model.__name__} not found")
    return resource


def create_owned(db: Session, resource: Any, admin_id: str | None) -> Any:
    """Persist a new resource with its creator as owner (unowned when no admin id)."""
    resource.owner_admin_id = normalize_admin_id(admin_id)
    db.add(resource)
    db.commit()
    db.refresh(resource)
    logger.info("%s %s created by %s", type(resource).__name__, resource.id, resource.owner_admin_id)
    return resource


def authorize_edit(
    db: Session,
    resource: Any,
    admin_id: str | None,
    *,
    registry: ResourceRegistry = default_registry,
    clock: Clock = utc_now,
) -> None:
    ensure_edit_access(
        db,
        resource,
        admin_id,
        registry=registry,
        clock=clock,
        delegation_policy=_delegation_policy(),
    )


def update_owned(
    db: Session,
    resource: Any,
    changes: dict[str, Any],
    admin_id: str | None,
    *,
    validate: Callable[[], None] | None = None,
    clock: Clock = utc_now,
) -> Any:
    """Apply ``changes`` once the gate passes. ``validate`` runs after the gate
    so callers without edit rights never see cross-row checks."""
    authorize_edit(db, resource, admin_id, clock=clock)
    if validate is not None:
        validate()
    for field, value in changes.items():
        setattr(resource, field, value)
    db.commit()
    db.refresh(resource)
    return resource


def delete_owned(db: Session, resource: Any, admin_id: str | None, *, clock: Clock = utc_now) -> None:
    authorize_edit(db, resource, admin_id, clock=clock)
    db.delete(resource)
    db.commit()
    logger.info("%s %s deleted by %s", type(resource).__name__, resource.id, admin_id)
