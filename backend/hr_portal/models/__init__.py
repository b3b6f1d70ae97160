from hr_portal.models.department import Department
from hr_portal.models.employee import Employee, EmploymentStatus
from hr_portal.models.recruitment import Candidate, JobApplication
from hr_portal.models.leave_request import LeaveRequest, LeaveStatus
from hr_portal.models.access_request import AccessRequest, AccessRequestStatus, ResourceType
from hr_portal.models.delegation import AdminDelegation, DelegationStatus
from hr_portal.models.audit import AuditLog

__all__ = [
    "Department",
    "Employee", "EmploymentStatus",
    "Candidate", "JobApplication",
    "LeaveRequest", "LeaveStatus",
    "AccessRequest", "AccessRequestStatus", "ResourceType",
    "AdminDelegation", "DelegationStatus",
    "AuditLog",
]
