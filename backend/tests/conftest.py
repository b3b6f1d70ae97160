"""Shared fixtures: in-memory SQLite database, pinned clock, resource factories."""
import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import date, datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import hr_portal.models  # noqa: F401  (registers every table on Base.metadata)
from hr_portal.core.deps import get_clock
from hr_portal.db.base import Base
from hr_portal.db.session import get_session
from hr_portal.models.access_request import ResourceType
from hr_portal.models.department import Department
from hr_portal.models.employee import Employee, EmploymentStatus
from hr_portal.models.leave_request import LeaveRequest, LeaveStatus
from hr_portal.models.recruitment import Candidate, JobApplication

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# ─── Database ─────────────────────────────────────────────────────────────────

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
def db(session_factory) -> Session:
    with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


# ─── Factories ────────────────────────────────────────────────────────────────

@pytest.fixture
def make_employee(db):
    counter = {"n": 0}

    def _make(owner: str | None = "admin-1", status: str = EmploymentStatus.ACTIVE.value, **fields) -> Employee:
        counter["n"] += 1
        employee = Employee(
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", f"Employee{counter['n']}"),
            email=fields.pop("email", f"employee{counter['n']}@example.com"),
            employment_status=status,
            owner_admin_id=owner,
            **fields,
        )
        db.add(employee)
        db.commit()
        return employee

    return _make


@pytest.fixture
def make_leave(db, make_employee):
    def _make(
        employee: Employee | None = None,
        owner: str | None = "admin-1",
        start: date = date(2026, 3, 2),
        end: date = date(2026, 3, 6),
        status: str = LeaveStatus.PENDING.value,
        created_at: datetime = T0,
    ) -> LeaveRequest:
        employee = employee or make_employee(owner=owner)
        leave = LeaveRequest(
            employee_id=employee.id,
            leave_type="Annual",
            start_date=start,
            end_date=end,
            status=status,
            owner_admin_id=owner,
            created_at=created_at,
        )
        db.add(leave)
        db.commit()
        return leave

    return _make


@pytest.fixture
def make_resource(db, make_employee, make_leave):
    """Create one resource of the given kind owned by ``owner``."""
    counter = {"n": 0}

    def _make(resource_type: ResourceType, owner: str | None = "admin-1"):
        if resource_type is ResourceType.EMPLOYEE:
            return make_employee(owner=owner)
        if resource_type is ResourceType.LEAVE_REQUEST:
            return make_leave(owner=owner)

        counter["n"] += 1
        if resource_type is ResourceType.DEPARTMENT:
            resource = Department(name=f"Department {counter['n']}", owner_admin_id=owner)
        elif resource_type is ResourceType.CANDIDATE:
            resource = Candidate(first_name="Cand", last_name="Idate", email="cand@example.com", owner_admin_id=owner)
        else:
            candidate = Candidate(first_name="Cand", last_name="Idate", email="cand@example.com")
            db.add(candidate)
            db.flush()
            resource = JobApplication(candidate_id=candidate.id, position="Engineer", owner_admin_id=owner)
        db.add(resource)
        db.commit()
        return resource

    return _make


# ─── HTTP client ──────────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def client(session_factory, clock):
    from hr_portal.main import app

    def _session_override():
        with session_factory() as session:
            try:
                yield session
            except Exception:
                session.rollback()
                raise

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
