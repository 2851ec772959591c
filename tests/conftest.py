import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from workforce.api import deps
from workforce.core import security
from workforce.core.enums import EmployeeStatus, Role
from workforce.db.gateway import Gateway
from workforce.db.models import Employee, Manager, User
from workforce.db.session import Database
from workforce.main import create_app


class Clock:
    def __init__(self, now: datetime):
        self.now = now


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def clock():
    return Clock(datetime(2025, 6, 2, 8, 30))


@pytest.fixture
def app(database, clock):
    app = create_app(database=database)
    app.dependency_overrides[deps.get_now] = lambda: clock.now
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def reader(database):
    """ Returns a fresh gateway per call so reads never come from a stale identity map. """
    sessions = []

    def open_gateway() -> Gateway:
        db = database.session()
        sessions.append(db)
        return Gateway(db)

    yield open_gateway
    for db in sessions:
        db.close()


class Factory:
    def __init__(self, database: Database):
        self._db = database.session()
        self.gateway = Gateway(self._db)
        self._counter = 0

    def close(self):
        self._db.close()

    def manager(self, name="Grace Hopper", email="grace@acme.com", department="Engineering") -> Manager:
        with self.gateway.transaction():
            return self.gateway.create(Manager, name=name, email=email, department=department)

    def employee(self, sap_id=None, name=None, email=None, **extra) -> Employee:
        self._counter += 1
        n = self._counter
        data = {
            "sap_id": sap_id or f"SAP-{n:04d}",
            "name": name or f"Employee {n}",
            "email": email or f"employee{n}@acme.com",
            "department": "Engineering",
            "position": "Developer",
            "role": Role.EMPLOYEE.value,
            "status": EmployeeStatus.ACTIVE.value,
        }
        data.update(extra)
        with self.gateway.transaction():
            return self.gateway.create(Employee, **data)

    def user(self, role=Role.EMPLOYEE, email=None, password="password123", employee=None) -> User:
        self._counter += 1
        with self.gateway.transaction():
            user = self.gateway.create(
                User,
                email=email or f"user{self._counter}@acme.com",
                name=f"{role.value.title()} {self._counter}",
                hashed_password=security.get_password_hash(password),
                role=role.value,
            )
            if employee is not None:
                self.gateway.update(employee, {"user": user})
        return user

    def headers(self, user: User) -> dict:
        return {"Authorization": f"Bearer {security.create_access_token(user)}"}


@pytest.fixture
def factory(database):
    factory = Factory(database)
    yield factory
    factory.close()


@pytest.fixture
def admin_headers(factory):
    return factory.headers(factory.user(Role.ADMIN))


@pytest.fixture
def manager_headers(factory):
    return factory.headers(factory.user(Role.MANAGER))


@pytest.fixture
def rpc(client):
    def call(procedure, body=None, headers=None):
        return client.post(f"/api/v1/{procedure}", json={} if body is None else body, headers=headers or {})
    return call
