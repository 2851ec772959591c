import pytest

from workforce.core.enums import Role
from workforce.core.errors import Forbidden, InvalidInput, Unauthenticated
from workforce.core.procedures import REGISTRY, ProcedureRouter, Tier, authorize
from workforce.core.security import Anonymous, Identified, create_access_token

ADMIN_PROCEDURES = sorted(name for name, tier in REGISTRY.items() if tier is Tier.ADMIN)
MANAGER_PROCEDURES = sorted(name for name, tier in REGISTRY.items() if tier is Tier.MANAGER)


def identified(role):
    return Identified(id=1, name="Someone", email="someone@acme.com", role=role, employee_id=None)


def test_every_procedure_declares_a_tier():
    assert "admin.calculate_salary" in ADMIN_PROCEDURES
    assert "employee.create" in ADMIN_PROCEDURES
    assert "admin.create_project" in MANAGER_PROCEDURES
    assert REGISTRY["auth.token"] is Tier.PUBLIC
    assert all(isinstance(tier, Tier) for tier in REGISTRY.values())


@pytest.mark.parametrize("procedure", ADMIN_PROCEDURES)
def test_admin_procedures_reject_anonymous(rpc, procedure):
    response = rpc(procedure)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"


@pytest.mark.parametrize("procedure", ADMIN_PROCEDURES)
def test_admin_procedures_reject_managers(rpc, manager_headers, procedure):
    response = rpc(procedure, headers=manager_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.parametrize("procedure", ADMIN_PROCEDURES)
def test_admin_procedures_admit_admins(rpc, admin_headers, procedure):
    # An empty body may still fail validation, but never the tier check.
    response = rpc(procedure, headers=admin_headers)
    assert response.status_code not in (401, 403)


@pytest.mark.parametrize("procedure", MANAGER_PROCEDURES)
def test_manager_procedures_reject_employees(rpc, factory, procedure):
    headers = factory.headers(factory.user(Role.EMPLOYEE))
    response = rpc(procedure, headers=headers)
    assert response.status_code == 403


def test_invalid_token_is_anonymous(rpc):
    response = rpc("auth.me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_expired_token_is_anonymous(rpc, factory):
    token = create_access_token(factory.user(Role.ADMIN), expires_minutes=-1)
    response = rpc("admin.list_managers", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_authorize_is_total():
    assert authorize(Anonymous(), Tier.PUBLIC) == Anonymous()
    with pytest.raises(Unauthenticated):
        authorize(Anonymous(), Tier.AUTHENTICATED)
    with pytest.raises(Unauthenticated):
        authorize(object(), Tier.AUTHENTICATED)
    with pytest.raises(Forbidden):
        authorize(identified(Role.EMPLOYEE), Tier.MANAGER)
    with pytest.raises(Forbidden):
        authorize(identified(Role.ADMIN), "admin")
    assert authorize(identified(Role.MANAGER), Tier.MANAGER).role is Role.MANAGER


def test_routes_without_a_tier_are_refused():
    router = ProcedureRouter("sandbox")
    with pytest.raises(TypeError):
        router.add_api_route("/sandbox.ping", lambda: None)
    with pytest.raises(TypeError):
        router.post("/sandbox.ping")(lambda: None)
    with pytest.raises(TypeError):
        router.procedure("ping", tier="public")


def test_procedure_names_are_unique():
    with pytest.raises(ValueError):
        ProcedureRouter("auth").procedure("me", tier=Tier.PUBLIC)


def test_validation_errors_are_invalid_input(rpc, admin_headers):
    response = rpc("employee.create", {"sap_id": "SAP-1"}, headers=admin_headers)
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_INPUT"
    assert response.json()["error"]["details"]["errors"][0]["loc"][0] == "body"
    assert InvalidInput.status_code == 422
