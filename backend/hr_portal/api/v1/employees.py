"""Employee API endpoints.

Mutations go through the authorization gate; listings accept ``scope=yours``
to show only employees owned by the current admin.
"""
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
from hr_portal.models.employee import Employee, EmploymentStatus
from hr_portal.schemas.hr import EmployeeCreate, EmployeeOut, EmployeeUpdate
from hr_portal.services import resources as resource_svc
from hr_portal.services.authorization import parse_scope
from hr_portal.services.identifiers import parse_resource_id

router = APIRouter()


def _load(db: Session, employee_id: str) -> Employee:
    return resource_svc.get_or_404(
        db, Employee, parse_resource_id(ResourceType.EMPLOYEE, employee_id), "Employee"
    )


def _check_references(db: Session, email: str | None, department_id: int | None, exclude_id: int | None = None):
    if email is not None:
        stmt = select(Employee.id).where(Employee.email == email)
        if exclude_id is not None:
            stmt = stmt.where(Employee.id != exclude_id)
        if db.execute(stmt).first() is not None:
            raise ValidationError("Email already exists")
    if department_id is not None and db.get(Department, department_id) is None:
        raise ValidationError("Department not found")


@router.get("", response_model=list[EmployeeOut], summary="List non-terminated employees")
def list_employees(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    scope: Annotated[str | None, Query(description="'yours' for employees you own, otherwise all")] = None,
):
    employees = resource_svc.list_owned(
        db,
        Employee,
        parse_scope(scope),
        admin_id,
        Employee.employment_status != EmploymentStatus.TERMINATED.value,
    )
    return [EmployeeOut.model_validate(e) for e in employees]


@router.get("/{employee_id}", response_model=EmployeeOut, summary="Get an employee")
def get_employee(employee_id: str, db: Annotated[Session, Depends(get_session)]):
    return EmployeeOut.model_validate(_load(db, employee_id))


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED, summary="Create an employee")
def create_employee(
    body: EmployeeCreate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
):
    _check_references(db, body.email, body.department_id)
    employee = resource_svc.create_owned(db, Employee(**body.model_dump()), admin_id)
    return EmployeeOut.model_validate(employee)


@router.patch("/{employee_id}", response_model=EmployeeOut, summary="Update an employee")
def update_employee(
    employee_id: str,
    body: EmployeeUpdate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    employee = _load(db, employee_id)
    changes = body.model_dump(exclude_unset=True)
    employee = resource_svc.update_owned(
        db,
        employee,
        changes,
        admin_id,
        validate=lambda: _check_references(
            db, changes.get("email"), changes.get("department_id"), exclude_id=employee.id
        ),
        clock=clock,
    )
    return EmployeeOut.model_validate(employee)


@router.post("/{employee_id}/terminate", response_model=EmployeeOut, summary="Terminate an employee")
def terminate_employee(
    employee_id: str,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    employee = _load(db, employee_id)
    employee = resource_svc.update_owned(
        db,
        employee,
        {"employment_status": EmploymentStatus.TERMINATED.value, "termination_date": clock()},
        admin_id,
        clock=clock,
    )
    return EmployeeOut.model_validate(employee)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an employee")
def delete_employee(
    employee_id: str,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    resource_svc.delete_owned(db, _load(db, employee_id), admin_id, clock=clock)
