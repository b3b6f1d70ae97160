"""Tests for the resource registry."""
import pytest

from hr_portal.core.exceptions import NotFoundError
from hr_portal.models.access_request import AccessRequest, ResourceType
from hr_portal.models.employee import Employee
from hr_portal.services.resource_registry import ResourceRegistry, default_registry


def test_default_registry_covers_every_type():
    for resource_type in ResourceType:
        assert default_registry.model_for(resource_type) is not None


def test_register_rejects_model_without_owner():
    registry = ResourceRegistry()

    class NoOwner:
        pass

    with pytest.raises(TypeError):
        registry.register(ResourceType.EMPLOYEE, NoOwner)


def test_type_of_resolves_instances(make_resource):
    employee = make_resource(ResourceType.EMPLOYEE)
    assert default_registry.type_of(employee) is ResourceType.EMPLOYEE

    with pytest.raises(TypeError):
        default_registry.type_of(AccessRequest())


@pytest.mark.parametrize("resource_type", list(ResourceType))
def test_resolve_owner_per_type(db, make_resource, resource_type):
    resource = make_resource(resource_type, owner="admin-1")
    assert default_registry.exists(db, resource_type, resource.id)
    assert default_registry.resolve_owner(db, resource_type, resource.id) == "admin-1"


def test_resolve_owner_blank_is_unowned(db, make_employee):
    assert default_registry.resolve_owner(db, ResourceType.EMPLOYEE, make_employee(owner=None).id) is None
    assert default_registry.resolve_owner(db, ResourceType.EMPLOYEE, make_employee(owner="  ").id) is None


def test_resolve_owner_missing_resource(db):
    assert not default_registry.exists(db, ResourceType.EMPLOYEE, 999)
    with pytest.raises(NotFoundError):
        default_registry.resolve_owner(db, ResourceType.EMPLOYEE, 999)


def test_unknown_type_is_absent(db):
    assert default_registry.find(db, None, 1) is None
    with pytest.raises(NotFoundError):
        default_registry.resolve_owner(db, None, 1)


def test_find_returns_model_instance(db, make_employee):
    employee = make_employee()
    assert isinstance(default_registry.find(db, ResourceType.EMPLOYEE, employee.id), Employee)
