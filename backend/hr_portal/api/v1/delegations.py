"""Admin delegation API endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hr_portal.core.clock import Clock
from hr_portal.core.deps import get_admin_id, get_clock, require_admin_id
from hr_portal.db.session import get_session
from hr_portal.schemas.delegation import DelegationCreate, DelegationOut
from hr_portal.services import delegations as delegation_svc

router = APIRouter()


@router.get(
    "/outgoing",
    response_model=list[DelegationOut],
    summary="Delegations the current admin has granted",
)
def get_my_delegations(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
):
    return [DelegationOut.model_validate(d) for d in delegation_svc.my_delegations(db, admin_id)]


@router.get(
    "/incoming",
    response_model=list[DelegationOut],
    summary="Delegations granted to the current admin",
)
def get_delegations_to_me(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
):
    return [DelegationOut.model_validate(d) for d in delegation_svc.delegations_to_me(db, admin_id)]


@router.get(
    "/delegated-admins",
    response_model=list[str],
    summary="Admins whose authority is currently delegated to the current admin",
)
def get_delegated_admin_ids(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    return delegation_svc.delegated_admin_ids(db, admin_id, clock())


@router.post(
    "",
    response_model=DelegationOut,
    status_code=status.HTTP_201_CREATED,
    summary="Delegate the current admin's authority to a peer for a bounded period",
)
def create_delegation(
    body: DelegationCreate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str, Depends(require_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    delegation = delegation_svc.create_delegation(
        db,
        from_admin_id=admin_id,
        to_admin_id=body.to_admin_id,
        start_date=body.start_date,
        end_date=body.end_date,
        reason=body.reason,
        clock=clock,
    )
    return DelegationOut.model_validate(delegation)


@router.post(
    "/{delegation_id}/revoke",
    response_model=DelegationOut,
    summary="Revoke a delegation (creator only)",
)
def revoke_delegation(
    delegation_id: int,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str, Depends(require_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    delegation = delegation_svc.revoke_delegation(db, delegation_id, admin_id, clock=clock)
    return DelegationOut.model_validate(delegation)
