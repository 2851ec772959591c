from datetime import datetime

import pytest

from workforce.db.models import AuditLog, Project


@pytest.fixture
def project(rpc, factory, manager_headers):
    manager = factory.manager()
    response = rpc(
        "admin.create_project",
        {"name": "Payroll revamp", "start_date": "2025-06-01", "end_date": "2025-12-31", "manager_id": manager.id},
        headers=manager_headers,
    )
    assert response.status_code == 201
    return response.json()


def assign(rpc, headers, project_id, employee_id):
    response = rpc(
        "admin.assign_project",
        {"project_id": project_id, "employee_id": employee_id, "task_description": "Backend"},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def progress(rpc, headers, assignment_id, percentage):
    return rpc(
        "admin.update_assignment_progress",
        {"assignment_id": assignment_id, "completion_percentage": percentage},
        headers=headers,
    )


def test_create_project_defaults(project):
    assert project["status"] == "ACTIVE"
    assert project["description"] == ""
    assert project["completion_percentage"] == 0
    assert project["assignments"] == []


def test_create_project_validation(rpc, factory, manager_headers):
    manager = factory.manager()
    backwards = {"name": "Backwards", "start_date": "2025-06-10", "end_date": "2025-06-01", "manager_id": manager.id}
    assert rpc("admin.create_project", backwards, headers=manager_headers).status_code == 422

    orphan = {"name": "Orphan", "start_date": "2025-06-10", "manager_id": 999}
    assert rpc("admin.create_project", orphan, headers=manager_headers).status_code == 404


def test_assign_unknown_references(rpc, factory, project, manager_headers):
    employee = factory.employee()
    missing_project = {"project_id": 999, "employee_id": employee.id}
    missing_employee = {"project_id": project["id"], "employee_id": 999}
    assert rpc("admin.assign_project", missing_project, headers=manager_headers).status_code == 404
    assert rpc("admin.assign_project", missing_employee, headers=manager_headers).status_code == 404


def test_completed_at_follows_percentage(rpc, clock, reader, factory, project, manager_headers):
    employee = factory.employee()
    assignment = assign(rpc, manager_headers, project["id"], employee.id)
    assert assignment["completion_percentage"] == 0

    clock.now = datetime(2025, 7, 1, 12, 0)
    done = progress(rpc, manager_headers, assignment["id"], 100).json()
    assert done["completed_at"] == "2025-07-01T12:00:00"

    clock.now = datetime(2025, 7, 2, 12, 0)
    still_done = progress(rpc, manager_headers, assignment["id"], 100).json()
    assert still_done["completed_at"] == "2025-07-01T12:00:00"

    reopened = progress(rpc, manager_headers, assignment["id"], 80).json()
    assert reopened["completed_at"] is None

    audits = reader().find(AuditLog, action="ASSIGNMENT_PROGRESS_UPDATED", order_by=(AuditLog.id,))
    assert [(a.details["old_percentage"], a.details["new_percentage"]) for a in audits] == [
        (0, 100), (100, 100), (100, 80),
    ]


def test_progress_out_of_range(rpc, factory, project, manager_headers):
    employee = factory.employee()
    assignment = assign(rpc, manager_headers, project["id"], employee.id)
    assert progress(rpc, manager_headers, assignment["id"], 101).status_code == 422
    assert progress(rpc, manager_headers, 999, 50).status_code == 404


def test_project_completion_is_derived(rpc, reader, factory, project, manager_headers):
    ids = [assign(rpc, manager_headers, project["id"], factory.employee().id)["id"] for _ in range(3)]
    progress(rpc, manager_headers, ids[1], 50)
    progress(rpc, manager_headers, ids[2], 100)

    listed = rpc("admin.list_projects", headers=manager_headers).json()
    assert listed[0]["completion_percentage"] == 50
    assert listed[0]["completed_assignments"] == 1

    detail = rpc("admin.project_detail", {"project_id": project["id"]}, headers=manager_headers).json()
    assert [a["id"] for a in detail["completed"]] == [ids[2]]
    assert sorted(a["id"] for a in detail["pending"]) == sorted(ids[:2])
    assert detail["manager"]["email"] == "grace@acme.com"

    # Nothing about completion is stored on the project row itself.
    assert not hasattr(reader().get(Project, project["id"]), "completion_percentage")


def test_project_detail_not_found(rpc, manager_headers):
    assert rpc("admin.project_detail", {"project_id": 404}, headers=manager_headers).status_code == 404


def test_managers(rpc, reader, factory, admin_headers):
    created = rpc(
        "admin.create_manager",
        {"name": "Linus", "email": "linus@acme.com", "department": "Kernel"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    assert created.json()["employees"] == []

    duplicate = rpc(
        "admin.create_manager",
        {"name": "Other", "email": "linus@acme.com", "department": "Kernel"},
        headers=admin_headers,
    )
    assert duplicate.status_code == 409

    factory.employee(manager_id=created.json()["id"])
    managers = rpc("admin.list_managers", headers=admin_headers).json()
    assert len(managers[0]["employees"]) == 1
    assert reader().count(AuditLog, action="MANAGER_CREATED") == 2
