"""Access request API endpoints.

  GET  /access-requests/inbox              requests addressed to me (owner)
  GET  /access-requests/outbox             requests I sent
  POST /access-requests                    ask an owner for temporary access
  POST /access-requests/{id}/approve       owner grants access for N minutes
  POST /access-requests/{id}/deny          owner refuses

Ids are accepted as ``AR-<n>`` or bare numbers.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hr_portal.core.clock import Clock
from hr_portal.core.config import settings
from hr_portal.core.deps import get_admin_id, get_clock, require_admin_id
from hr_portal.core.limiter import limiter
from hr_portal.db.session import get_session
from hr_portal.schemas.access_request import (
    AccessRequestCreate,
    AccessRequestDecision,
    AccessRequestOut,
)
from hr_portal.services import access_requests as access_svc
from hr_portal.services.identifiers import parse_access_request_id

router = APIRouter()


@router.get(
    "/inbox",
    response_model=list[AccessRequestOut],
    summary="List access requests addressed to the current admin",
)
def get_inbox(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
):
    return [AccessRequestOut.from_model(r) for r in access_svc.get_inbox(db, admin_id)]


@router.get(
    "/outbox",
    response_model=list[AccessRequestOut],
    summary="List access requests sent by the current admin",
)
def get_outbox(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
):
    return [AccessRequestOut.from_model(r) for r in access_svc.get_outbox(db, admin_id)]


@router.post(
    "",
    response_model=AccessRequestOut,
    summary="Request temporary modify access to another admin's resource",
)
@limiter.limit(settings.ACCESS_REQUEST_RATE_LIMIT)
def create_access_request(
    request: Request,
    body: AccessRequestCreate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str, Depends(require_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    """Returns the existing request instead of a duplicate when one is pending or an active grant exists."""
    access_request = access_svc.create_access_request(
        db,
        requester_admin_id=admin_id,
        resource_type=body.resource_type,
        resource_id=body.resource_id,
        note=body.note,
        clock=clock,
    )
    return AccessRequestOut.from_model(access_request)


@router.post(
    "/{request_id}/approve",
    response_model=AccessRequestOut,
    summary="Approve an access request (owner only)",
)
def approve_access_request(
    request_id: str,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str, Depends(require_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
    body: AccessRequestDecision | None = None,
):
    access_request = access_svc.approve_access_request(
        db,
        parse_access_request_id(request_id),
        admin_id,
        allow_minutes=body.allow_minutes if body else None,
        clock=clock,
    )
    return AccessRequestOut.from_model(access_request)


@router.post(
    "/{request_id}/deny",
    response_model=AccessRequestOut,
    summary="Deny an access request (owner only)",
)
def deny_access_request(
    request_id: str,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str, Depends(require_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    access_request = access_svc.deny_access_request(
        db, parse_access_request_id(request_id), admin_id, clock=clock
    )
    return AccessRequestOut.from_model(access_request)
