from datetime import date, datetime

from workforce.core.enums import AuditOutcome, Role
from workforce.db.models import Attendance, AuditLog, Employee

NEW_EMPLOYEE = {
    "sap_id": "SAP-0100",
    "name": "Alan Turing",
    "email": "alan@acme.com",
    "department": "Research",
    "position": "Scientist",
}


def test_create_employee(rpc, reader, admin_headers):
    response = rpc("employee.create", NEW_EMPLOYEE, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "ACTIVE"
    assert body["role"] == "EMPLOYEE"
    audit = reader().find_one(AuditLog, action="EMPLOYEE_CREATED")
    assert audit.outcome == AuditOutcome.SUCCESS.value
    assert audit.entity_id == str(body["id"])
    assert audit.details["sap_id"] == "SAP-0100"


def test_duplicate_sap_id_conflicts(rpc, reader, admin_headers):
    rpc("employee.create", NEW_EMPLOYEE, headers=admin_headers)

    response = rpc("employee.create", dict(NEW_EMPLOYEE, email="other@acme.com"), headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["error"]["details"] == {"field": "sap_id"}
    gateway = reader()
    assert gateway.count(Employee, sap_id="SAP-0100") == 1
    assert gateway.count(AuditLog, action="EMPLOYEE_CREATED", outcome=AuditOutcome.FAILURE.value) == 1


def test_duplicate_email_conflicts(rpc, admin_headers):
    rpc("employee.create", NEW_EMPLOYEE, headers=admin_headers)
    response = rpc("employee.create", dict(NEW_EMPLOYEE, sap_id="SAP-0101"), headers=admin_headers)
    assert response.json()["error"]["details"] == {"field": "email"}


def test_create_with_unknown_manager(rpc, admin_headers):
    response = rpc("employee.create", dict(NEW_EMPLOYEE, manager_id=42), headers=admin_headers)
    assert response.status_code == 404


def test_update_audits_only_changed_fields(rpc, reader, factory, admin_headers):
    employee = factory.employee(name="Old Name", department="Engineering")

    response = rpc(
        "employee.update",
        {"id": employee.id, "name": "New Name", "department": "Engineering", "status": "ON_LEAVE"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "New Name"
    audit = reader().find_one(AuditLog, action="EMPLOYEE_UPDATED")
    assert audit.details["changes"] == {
        "name": {"from": "Old Name", "to": "New Name"},
        "status": {"from": "ACTIVE", "to": "ON_LEAVE"},
    }


def test_update_email_clash(rpc, factory, admin_headers):
    first = factory.employee(email="first@acme.com")
    second = factory.employee(email="second@acme.com")

    response = rpc("employee.update", {"id": second.id, "email": "first@acme.com"}, headers=admin_headers)

    assert response.status_code == 409
    assert first.id != second.id


def test_update_unknown_employee_or_manager(rpc, factory, admin_headers):
    assert rpc("employee.update", {"id": 404, "name": "X"}, headers=admin_headers).status_code == 404
    employee = factory.employee()
    response = rpc("employee.update", {"id": employee.id, "manager_id": 404}, headers=admin_headers)
    assert response.status_code == 404


def test_update_assigns_manager(rpc, factory, admin_headers):
    manager = factory.manager()
    employee = factory.employee()
    response = rpc("employee.update", {"id": employee.id, "manager_id": manager.id}, headers=admin_headers)
    assert response.json()["manager_id"] == manager.id


def test_delete_is_restricted_by_dependents(rpc, reader, factory, admin_headers):
    employee = factory.employee()
    with factory.gateway.transaction():
        factory.gateway.create(
            Attendance,
            employee_id=employee.id,
            date=date(2025, 6, 2),
            check_in_time=datetime(2025, 6, 2, 9, 0),
            status="PRESENT",
            is_late=False,
        )

    response = rpc("employee.delete", {"id": employee.id}, headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["error"]["details"] == {"attendance": 1}
    assert reader().count(Employee, id=employee.id) == 1


def test_delete_employee(rpc, reader, factory, admin_headers):
    employee = factory.employee(sap_id="SAP-0555")

    response = rpc("employee.delete", {"id": employee.id}, headers=admin_headers)

    assert response.json() == {"success": True, "id": employee.id}
    gateway = reader()
    assert gateway.count(Employee, id=employee.id) == 0
    assert gateway.find_one(AuditLog, action="EMPLOYEE_DELETED").details["sap_id"] == "SAP-0555"
    assert rpc("employee.delete", {"id": employee.id}, headers=admin_headers).status_code == 404


def test_get_by_id_is_self_or_manager(rpc, factory, manager_headers):
    me = factory.employee()
    other = factory.employee()
    headers = factory.headers(factory.user(Role.EMPLOYEE, employee=me))

    own = rpc("employee.get_by_id", {"id": me.id}, headers=headers)
    assert own.status_code == 200
    assert own.json()["user"]["email"].endswith("@acme.com")
    assert rpc("employee.get_by_id", {"id": other.id}, headers=headers).status_code == 403
    assert rpc("employee.get_by_id", {"id": other.id}, headers=manager_headers).status_code == 200


def test_list_and_search(rpc, factory, manager_headers):
    factory.employee(name="Charlie", department="Sales")
    factory.employee(name="Alice", department="Engineering")
    factory.employee(name="Bob", department="Engineering", status="INACTIVE")

    listed = rpc("employee.list", {"department": "Engineering"}, headers=manager_headers).json()
    assert [e["name"] for e in listed] == ["Alice", "Bob"]

    active = rpc("employee.list", {"status": "ACTIVE"}, headers=manager_headers).json()
    assert [e["name"] for e in active] == ["Alice", "Charlie"]

    found = rpc("employee.search", {"query": "sal"}, headers=manager_headers).json()
    assert [e["name"] for e in found] == ["Charlie"]


def test_admin_employee_listing_includes_assignments(rpc, factory, admin_headers):
    manager = factory.manager()
    factory.employee(manager_id=manager.id)

    listed = rpc("admin.list_employees", headers=admin_headers).json()

    assert listed[0]["manager"]["id"] == manager.id
    assert listed[0]["project_assignments"] == []


def test_update_rejects_null_for_required_fields(rpc, reader, factory, admin_headers):
    employee = factory.employee(name="Keep Me")

    for field in ("name", "email", "department", "position", "role", "status"):
        response = rpc("employee.update", {"id": employee.id, field: None}, headers=admin_headers)
        assert response.status_code == 422, field
        assert response.json()["error"]["code"] == "INVALID_INPUT"

    gateway = reader()
    assert gateway.get(Employee, employee.id).name == "Keep Me"
    assert gateway.count(AuditLog, action="EMPLOYEE_UPDATED") == 0


def test_update_can_clear_manager(rpc, factory, admin_headers):
    manager = factory.manager()
    employee = factory.employee(manager_id=manager.id)

    response = rpc("employee.update", {"id": employee.id, "manager_id": None}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["manager_id"] is None
