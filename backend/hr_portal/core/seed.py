"""Seed demo HR data into the database.

Every record is owned by one of the demo admins so the access-request flow can
be tried straight away. Re-running the seed leaves existing rows alone.
"""
import logging
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from hr_portal.db.session import SessionLocal
from hr_portal.models.department import Department
from hr_portal.models.employee import Employee, EmploymentStatus
from hr_portal.models.leave_request import LeaveRequest, LeaveStatus
from hr_portal.models.recruitment import Candidate, JobApplication

logger = logging.getLogger(__name__)

# (name, description, owner_admin_id)
DEFAULT_DEPARTMENTS = [
    ("Engineering", "Product and platform engineering", "admin-1"),
    ("People Operations", "HR, recruiting and payroll", "admin-2"),
    ("Finance", "Accounting and planning", None),
]

# (first_name, last_name, email, department_name, owner_admin_id)
DEFAULT_EMPLOYEES = [
    ("Ada", "Lovelace", "ada@example.com", "Engineering", "admin-1"),
    ("Grace", "Hopper", "grace@example.com", "Engineering", "admin-1"),
    ("Frances", "Perkins", "frances@example.com", "People Operations", "admin-2"),
]

# (first_name, last_name, email, position, owner_admin_id)
DEFAULT_CANDIDATES = [
    ("Alan", "Turing", "alan@example.com", "Backend Engineer", "admin-2"),
    ("Katherine", "Johnson", "katherine@example.com", "Data Analyst", "admin-2"),
]


def _seed_departments(db: Session) -> dict[str, Department]:
    departments = {}
    for name, description, owner in DEFAULT_DEPARTMENTS:
        department = db.execute(select(Department).where(Department.name == name)).scalars().first()
        if department is None:
            department = Department(name=name, description=description, owner_admin_id=owner)
            db.add(department)
            logger.info("Seeded department: %s (owner=%s)", name, owner)
        departments[name] = department
    db.flush()
    return departments


def _seed_employees(db: Session, departments: dict[str, Department]) -> list[Employee]:
    employees = []
    for first, last, email, department_name, owner in DEFAULT_EMPLOYEES:
        employee = db.execute(select(Employee).where(Employee.email == email)).scalars().first()
        if employee is None:
            employee = Employee(
                first_name=first,
                last_name=last,
                email=email,
                department_id=departments[department_name].id,
                employment_status=EmploymentStatus.ACTIVE.value,
                owner_admin_id=owner,
            )
            db.add(employee)
            logger.info("Seeded employee: %s", email)
        employees.append(employee)
    db.flush()
    return employees


def _seed_recruitment(db: Session) -> None:
    for first, last, email, position, owner in DEFAULT_CANDIDATES:
        candidate = db.execute(select(Candidate).where(Candidate.email == email)).scalars().first()
        if candidate is not None:
            continue
        candidate = Candidate(first_name=first, last_name=last, email=email, owner_admin_id=owner)
        db.add(candidate)
        db.flush()
        db.add(JobApplication(candidate_id=candidate.id, position=position, owner_admin_id=owner))
        logger.info("Seeded candidate and application: %s -> %s", email, position)


def _seed_leave(db: Session, employees: list[Employee]) -> None:
    if db.execute(select(LeaveRequest.id).limit(1)).first() is not None:
        return
    start = date.today() + timedelta(days=7)
    for employee in employees[:2]:
        db.add(
            LeaveRequest(
                employee_id=employee.id,
                leave_type="Annual",
                start_date=start,
                end_date=start + timedelta(days=4),
                reason="Family holiday",
                status=LeaveStatus.PENDING.value,
                owner_admin_id=employee.owner_admin_id,
            )
        )
    logger.info("Seeded pending leave requests")


def seed_demo_data(db: Session) -> None:
    departments = _seed_departments(db)
    employees = _seed_employees(db, departments)
    _seed_recruitment(db)
    _seed_leave(db, employees)
    db.commit()


def run_seed() -> None:
    with SessionLocal() as db:
        seed_demo_data(db)
    logger.info("Seeding complete.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_seed()
