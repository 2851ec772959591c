from workforce.core import security
from workforce.core.enums import Role
from workforce.db.models import AuditLog, User


def login(client, email, password):
    return client.post("/api/v1/auth.token", data={"username": email, "password": password})


def test_login_issues_token_with_session_claims(client, rpc, factory):
    employee = factory.employee()
    factory.user(Role.EMPLOYEE, email="ada@acme.com", password="s3cret-pass", employee=employee)

    response = login(client, "ada@acme.com", "s3cret-pass")

    assert response.status_code == 200
    token = response.json()
    assert token["token_type"] == "bearer"
    me = rpc("auth.me", headers={"Authorization": f"Bearer {token['access_token']}"}).json()
    assert me["email"] == "ada@acme.com"
    assert me["role"] == "EMPLOYEE"
    assert me["employee_id"] == employee.id


def test_login_with_wrong_password(client, factory):
    factory.user(Role.EMPLOYEE, email="ada@acme.com", password="s3cret-pass")

    response = login(client, "ada@acme.com", "wrong-pass")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"
    assert login(client, "nobody@acme.com", "whatever").status_code == 401


def test_change_password(client, rpc, reader, factory):
    user = factory.user(Role.EMPLOYEE, email="ada@acme.com", password="old-password")
    headers = factory.headers(user)

    wrong = rpc(
        "auth.change_password",
        {"current_password": "not-it", "new_password": "new-password"},
        headers=headers,
    )
    assert wrong.status_code == 400

    ok = rpc(
        "auth.change_password",
        {"current_password": "old-password", "new_password": "new-password"},
        headers=headers,
    )
    assert ok.json() == {"success": True}
    assert login(client, "ada@acme.com", "new-password").status_code == 200
    outcomes = sorted(a.outcome for a in reader().find(AuditLog, action="PASSWORD_CHANGED"))
    assert outcomes == ["FAILURE", "SUCCESS"]


def test_create_user_linked_to_employee(rpc, reader, factory, admin_headers):
    employee = factory.employee()
    body = {"email": "new@acme.com", "name": "New", "password": "password123", "employee_id": employee.id}

    response = rpc("admin.create_user", body, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["employee_id"] == employee.id
    user = reader().find_one(User, email="new@acme.com")
    assert user.hashed_password.startswith("$argon2")
    assert security.verify_password("password123", user.hashed_password)

    taken = rpc("admin.create_user", dict(body, email="another@acme.com"), headers=admin_headers)
    assert taken.status_code == 409
    assert rpc("admin.create_user", dict(body, employee_id=None), headers=admin_headers).status_code == 409
    missing = rpc("admin.create_user", dict(body, email="third@acme.com", employee_id=999), headers=admin_headers)
    assert missing.status_code == 404


def test_root(client):
    assert client.get("/").status_code == 200


def test_deleted_profile_never_passes_as_another_employee(rpc, factory, admin_headers):
    old = factory.employee()
    headers = factory.headers(factory.user(Role.EMPLOYEE, employee=old))
    assert rpc("employee.delete", {"id": old.id}, headers=admin_headers).status_code == 200

    newcomer = factory.employee()

    assert newcomer.id != old.id
    assert rpc("employee.get_by_id", {"id": newcomer.id}, headers=headers).status_code == 403
    assert rpc("attendance.check_in", {"employee_id": old.id}, headers=headers).status_code == 403
    assert rpc("auth.me", headers=headers).json()["employee_id"] is None


def test_role_comes_from_the_account_not_the_token(rpc, factory):
    user = factory.user(Role.ADMIN)
    headers = factory.headers(user)
    assert rpc("admin.list_managers", headers=headers).status_code == 200

    with factory.gateway.transaction():
        factory.gateway.update(user, {"role": Role.EMPLOYEE.value})

    assert rpc("admin.list_managers", headers=headers).status_code == 403
    assert rpc("auth.me", headers=headers).json()["role"] == "EMPLOYEE"


def test_removed_account_is_anonymous(rpc, factory):
    user = factory.user(Role.MANAGER)
    headers = factory.headers(user)

    with factory.gateway.transaction():
        factory.gateway.delete(user)

    response = rpc("auth.me", headers=headers)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"
