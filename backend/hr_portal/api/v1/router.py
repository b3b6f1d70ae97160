from fastapi import APIRouter

from hr_portal.api.v1 import access_requests, audit, delegations, departments, employees, leave_requests
from hr_portal.api.v1 import recruitment

api_router = APIRouter()

api_router.include_router(access_requests.router, prefix="/access-requests", tags=["access-requests"])
api_router.include_router(delegations.router, prefix="/delegations", tags=["delegations"])
api_router.include_router(departments.router, prefix="/departments", tags=["departments"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(recruitment.candidates_router, prefix="/candidates", tags=["recruitment"])
api_router.include_router(recruitment.applications_router, prefix="/job-applications", tags=["recruitment"])
api_router.include_router(leave_requests.router, prefix="/leave-requests", tags=["leave-requests"])
api_router.include_router(audit.router, prefix="/audit", tags=["audit"])
