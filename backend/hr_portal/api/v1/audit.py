"""Audit log API endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hr_portal.db.session import get_session
from hr_portal.schemas.audit import AuditLogOut
from hr_portal.services import audit as audit_svc

router = APIRouter()


@router.get("", response_model=list[AuditLogOut], summary="List audit log entries, newest first")
def list_audit_logs(
    db: Annotated[Session, Depends(get_session)],
    entity_type: Annotated[str | None, Query(description="Filter by entity type (e.g., 'access_request', 'Employee')")] = None,
    entity_id: Annotated[int | None, Query(description="Filter by numeric entity id")] = None,
    actor_admin_id: Annotated[str | None, Query(description="Filter by acting admin")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    entries = audit_svc.list_entries(
        db, entity_type=entity_type, entity_id=entity_id, actor_admin_id=actor_admin_id, limit=limit
    )
    return [AuditLogOut.model_validate(entry) for entry in entries]
