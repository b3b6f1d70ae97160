"""Department API endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from hr_portal.core.clock import Clock
from hr_portal.core.deps import get_admin_id, get_clock
from hr_portal.core.exceptions import ValidationError
from hr_portal.db.session import get_session
from hr_portal.models.access_request import ResourceType
from hr_portal.models.department import Department
from hr_portal.schemas.hr import DepartmentCreate, DepartmentOut, DepartmentUpdate
from hr_portal.services import resources as resource_svc
from hr_portal.services.authorization import parse_scope
from hr_portal.services.identifiers import parse_resource_id

router = APIRouter()


def _load(db: Session, department_id: str) -> Department:
    return resource_svc.get_or_404(
        db, Department, parse_resource_id(ResourceType.DEPARTMENT, department_id), "Department"
    )


def _check_unique_name(db: Session, name: str | None, exclude_id: int | None = None) -> None:
    if name is None:
        return
    stmt = select(Department.id).where(Department.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Department.id != exclude_id)
    if db.execute(stmt).first() is not None:
        raise ValidationError("Department name already exists")


@router.get("", response_model=list[DepartmentOut], summary="List departments")
def list_departments(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    scope: Annotated[str | None, Query(description="'yours' for departments you own, otherwise all")] = None,
):
    departments = resource_svc.list_owned(db, Department, parse_scope(scope), admin_id)
    return [DepartmentOut.model_validate(d) for d in departments]


@router.get("/{department_id}", response_model=DepartmentOut, summary="Get a department")
def get_department(department_id: str, db: Annotated[Session, Depends(get_session)]):
    return DepartmentOut.model_validate(_load(db, department_id))


@router.post("", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED, summary="Create a department")
def create_department(
    body: DepartmentCreate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
):
    _check_unique_name(db, body.name)
    department = resource_svc.create_owned(db, Department(**body.model_dump()), admin_id)
    return DepartmentOut.model_validate(department)


@router.patch("/{department_id}", response_model=DepartmentOut, summary="Update a department")
def update_department(
    department_id: str,
    body: DepartmentUpdate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    department = _load(db, department_id)
    changes = body.model_dump(exclude_unset=True)
    department = resource_svc.update_owned(
        db,
        department,
        changes,
        admin_id,
        validate=lambda: _check_unique_name(db, changes.get("name"), exclude_id=department.id),
        clock=clock,
    )
    return DepartmentOut.model_validate(department)


@router.delete("/{department_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a department")
def delete_department(
    department_id: str,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    resource_svc.delete_owned(db, _load(db, department_id), admin_id, clock=clock)
