"""Append-only audit trail for access-control decisions and reconciliation changes.

Writers flush but never commit: the entry lands in the same transaction as the
change it describes.
"""
import json
import logging
from datetime import date, datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hr_portal.core.admin_identity import normalize_admin_id
from hr_portal.models.audit import AuditLog

logger = logging.getLogger(__name__)


def _snapshot(state: Any | None) -> str | None:
    if state is None:
        return None

    def _default(value: Any) -> str:
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return str(value)

    return json.dumps(state, default=_default, sort_keys=True)


def log(
    db: Session,
    action: str,
    entity_type: str,
    entity_id: int | None = None,
    actor_admin_id: str | None = None,
    before: Any | None = None,
    after: Any | None = None,
    notes: str | None = None,
) -> AuditLog:
    """Record one audit entry in the caller's transaction.

    Args:
        action: Dotted verb, e.g. 'access_request.approved', 'ownership.adopted'.
        entity_type: 'access_request', 'admin_delegation' or a resource type tag.
        actor_admin_id: None for background loops.
        before/after: JSON-serialisable snapshots; datetimes are stored as ISO 8601.
    """
    entry = AuditLog(
        actor_admin_id=normalize_admin_id(actor_admin_id),
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        before_state=_snapshot(before),
        after_state=_snapshot(after),
        notes=notes,
    )
    db.add(entry)
    db.flush()
    logger.debug("Audit: %s %s/%s by %s", action, entity_type, entity_id, entry.actor_admin_id or "system")
    return entry


def list_entries(
    db: Session,
    entity_type: str | None = None,
    entity_id: int | None = None,
    actor_admin_id: str | None = None,
    limit: int = 100,
) -> list[AuditLog]:
    """Newest first."""
    query = select(AuditLog)
    if entity_type:
        query = query.where(AuditLog.entity_type == entity_type)
    if entity_id is not None:
        query = query.where(AuditLog.entity_id == entity_id)
    actor = normalize_admin_id(actor_admin_id)
    if actor is not None:
        query = query.where(func.lower(AuditLog.actor_admin_id) == actor.lower())
    return list(db.execute(query.order_by(AuditLog.id.desc()).limit(limit)).scalars().all())
