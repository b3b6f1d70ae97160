"""Candidate and job application API endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hr_portal.core.clock import Clock
from hr_portal.core.deps import get_admin_id, get_clock
from hr_portal.core.exceptions import ValidationError
from hr_portal.db.session import get_session
from hr_portal.models.access_request import ResourceType
from hr_portal.models.recruitment import Candidate, JobApplication
from hr_portal.schemas.hr import (
    CandidateCreate,
    CandidateOut,
    CandidateUpdate,
    JobApplicationCreate,
    JobApplicationOut,
    JobApplicationUpdate,
)
from hr_portal.services import resources as resource_svc
from hr_portal.services.authorization import parse_scope
from hr_portal.services.identifiers import parse_resource_id

candidates_router = APIRouter()
applications_router = APIRouter()

ScopeQuery = Annotated[str | None, Query(description="'yours' for records you own, otherwise all")]


# ─── Candidates ───

def _load_candidate(db: Session, candidate_id: str) -> Candidate:
    return resource_svc.get_or_404(
        db, Candidate, parse_resource_id(ResourceType.CANDIDATE, candidate_id), "Candidate"
    )


@candidates_router.get("", response_model=list[CandidateOut], summary="List candidates")
def list_candidates(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    scope: ScopeQuery = None,
):
    candidates = resource_svc.list_owned(db, Candidate, parse_scope(scope), admin_id)
    return [CandidateOut.model_validate(c) for c in candidates]


@candidates_router.get("/{candidate_id}", response_model=CandidateOut, summary="Get a candidate")
def get_candidate(candidate_id: str, db: Annotated[Session, Depends(get_session)]):
    return CandidateOut.model_validate(_load_candidate(db, candidate_id))


@candidates_router.post(
    "", response_model=CandidateOut, status_code=status.HTTP_201_CREATED, summary="Create a candidate"
)
def create_candidate(
    body: CandidateCreate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
):
    candidate = resource_svc.create_owned(db, Candidate(**body.model_dump()), admin_id)
    return CandidateOut.model_validate(candidate)


@candidates_router.patch("/{candidate_id}", response_model=CandidateOut, summary="Update a candidate")
def update_candidate(
    candidate_id: str,
    body: CandidateUpdate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    candidate = resource_svc.update_owned(
        db, _load_candidate(db, candidate_id), body.model_dump(exclude_unset=True), admin_id, clock=clock
    )
    return CandidateOut.model_validate(candidate)


@candidates_router.delete(
    "/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a candidate"
)
def delete_candidate(
    candidate_id: str,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    resource_svc.delete_owned(db, _load_candidate(db, candidate_id), admin_id, clock=clock)


# ─── Job applications ───

def _load_application(db: Session, application_id: str) -> JobApplication:
    return resource_svc.get_or_404(
        db,
        JobApplication,
        parse_resource_id(ResourceType.JOB_APPLICATION, application_id),
        "Job application",
    )


@applications_router.get("", response_model=list[JobApplicationOut], summary="List job applications")
def list_applications(
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    scope: ScopeQuery = None,
):
    applications = resource_svc.list_owned(db, JobApplication, parse_scope(scope), admin_id)
    return [JobApplicationOut.model_validate(a) for a in applications]


@applications_router.get(
    "/{application_id}", response_model=JobApplicationOut, summary="Get a job application"
)
def get_application(application_id: str, db: Annotated[Session, Depends(get_session)]):
    return JobApplicationOut.model_validate(_load_application(db, application_id))


@applications_router.post(
    "", response_model=JobApplicationOut, status_code=status.HTTP_201_CREATED, summary="Create a job application"
)
def create_application(
    body: JobApplicationCreate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
):
    if db.get(Candidate, body.candidate_id) is None:
        raise ValidationError("Candidate not found")
    application = resource_svc.create_owned(db, JobApplication(**body.model_dump()), admin_id)
    return JobApplicationOut.model_validate(application)


@applications_router.patch(
    "/{application_id}", response_model=JobApplicationOut, summary="Update a job application"
)
def update_application(
    application_id: str,
    body: JobApplicationUpdate,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    application = resource_svc.update_owned(
        db, _load_application(db, application_id), body.model_dump(exclude_unset=True), admin_id, clock=clock
    )
    return JobApplicationOut.model_validate(application)


@applications_router.delete(
    "/{application_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a job application"
)
def delete_application(
    application_id: str,
    db: Annotated[Session, Depends(get_session)],
    admin_id: Annotated[str | None, Depends(get_admin_id)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    resource_svc.delete_owned(db, _load_application(db, application_id), admin_id, clock=clock)
