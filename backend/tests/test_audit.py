"""Tests for the audit trail query."""
from hr_portal.services import audit as audit_svc


def _entries(db):
    audit_svc.log(db, action="ownership.adopted", entity_type="Employee", entity_id=1, actor_admin_id="Admin-2")
    audit_svc.log(db, action="access_request.created", entity_type="access_request", entity_id=1, actor_admin_id="admin-3")
    audit_svc.log(db, action="access_request.approved", entity_type="access_request", entity_id=1, actor_admin_id="admin-1")
    db.commit()


def test_actor_filter_ignores_case_and_whitespace(db):
    _entries(db)

    entries = audit_svc.list_entries(db, actor_admin_id=" ADMIN-2 ")

    assert [e.action for e in entries] == ["ownership.adopted"]


def test_filters_combine_newest_first(db):
    _entries(db)

    entries = audit_svc.list_entries(db, entity_type="access_request", entity_id=1)
    assert [e.action for e in entries] == ["access_request.approved", "access_request.created"]

    assert audit_svc.list_entries(db, actor_admin_id="   ") == audit_svc.list_entries(db)
    assert len(audit_svc.list_entries(db, limit=1)) == 1
