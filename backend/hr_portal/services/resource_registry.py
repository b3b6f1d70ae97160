"""Resource registry: the one place resource-kind specifics meet the access-control core.

Everything above this module works purely in terms of ``(ResourceType, id)``.
Adding a resource kind is a ``register`` call, not a new branch elsewhere.
"""
from typing import Any

from sqlalchemy.orm import Session

from hr_portal.core.exceptions import NotFoundError
from hr_portal.models.access_request import ResourceType


class ResourceRegistry:
    def __init__(self) -> None:
        self._models: dict[ResourceType, type] = {}

    def register(self, resource_type: ResourceType, model: type) -> None:
        if not hasattr(model, "owner_admin_id"):
            raise TypeError(f"{model.__name__} has no owner_admin_id column")
        self._models[resource_type] = model

    def model_for(self, resource_type: ResourceType) -> type | None:
        return self._models.get(resource_type)

    def type_of(self, resource: Any) -> ResourceType:
        for resource_type, model in self._models.items():
            if type(resource) is model:
                return resource_type
        raise TypeError(f"{type(resource).__name__} is not a registered resource")

    def find(self, db: Session, resource_type: ResourceType | None, resource_id: int) -> Any | None:
        model = self._models.get(resource_type) if resource_type is not None else None
        if model is None:
            return None
        return db.get(model, resource_id)

    def exists(self, db: Session, resource_type: ResourceType | None, resource_id: int) -> bool:
        return self.find(db, resource_type, resource_id) is not None

    def resolve_owner(self, db: Session, resource_type: ResourceType | None, resource_id: int) -> str | None:
        """Return the owner admin id (``None`` when unowned); raise NotFoundError when absent."""
        resource = self.find(db, resource_type, resource_id)
        if resource is None:
            raise NotFoundError("Resource not found")
        owner = resource.owner_admin_id
        if owner is None or not owner.strip():
            return None
        return owner


def build_default_registry() -> ResourceRegistry:
    from hr_portal.models.department import Department
    from hr_portal.models.employee import Employee
    from hr_portal.models.leave_request import LeaveRequest
    from hr_portal.models.recruitment import Candidate, JobApplication

    registry = ResourceRegistry()
    registry.register(ResourceType.DEPARTMENT, Department)
    registry.register(ResourceType.EMPLOYEE, Employee)
    registry.register(ResourceType.CANDIDATE, Candidate)
    registry.register(ResourceType.JOB_APPLICATION, JobApplication)
    registry.register(ResourceType.LEAVE_REQUEST, LeaveRequest)
    return registry


default_registry = build_default_registry()
