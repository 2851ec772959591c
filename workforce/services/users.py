# workforce/services/users.py
# Login accounts: creation, credential checks and password changes.
import logging
from typing import Optional

from workforce.core import security
from workforce.core.errors import BadRequest, Conflict, Unauthenticated
from workforce.core.security import Identified, Session
from workforce.db.gateway import Gateway
from workforce.db.models import Employee, User
from workforce.schemas import user as user_schema
from workforce.services.audit import AuditTrail

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, gateway: Gateway, session: Session, *, ip_address: Optional[str] = None):
        self._gateway = gateway
        self._session = session
        self._audit = AuditTrail(gateway, session, ip_address)

    def authenticate(self, email: str, password: str) -> User:
        user = self._gateway.find_one(User, includes=("employee",), email=email)
        if not user or not security.verify_password(password, user.hashed_password):
            logger.warning("Failed login for %s", email)
            raise Unauthenticated("Incorrect username or password")
        return user

    def _current_user(self) -> User:
        if not isinstance(self._session, Identified):
            raise Unauthenticated()
        return self._gateway.get(User, self._session.id, includes=("employee",))

    def create(self, data: user_schema.UserCreate) -> User:
        """ Creates a login account, optionally linking it to an existing employee profile. """
        with self._audit.mutation(
            "USER_CREATED", "User", email=data.email, role=data.role.value, employee_id=data.employee_id,
        ) as entry:
            if self._gateway.find_one(User, email=data.email) is not None:
                raise Conflict("Email already registered", {"field": "email"})
            employee = None
            if data.employee_id is not None:
                employee = self._gateway.get(Employee, data.employee_id)
                if employee.user_id is not None:
                    raise Conflict("Employee already has a login account", {"employee_id": employee.id})

            user = self._gateway.create(
                User,
                email=data.email,
                name=data.name,
                hashed_password=security.get_password_hash(data.password),
                role=data.role.value,
            )
            if employee is not None:
                self._gateway.update(employee, {"user": user})
            entry.target(user)
        return self._gateway.get(User, user.id, includes=("employee",))

    def change_password(self, data: user_schema.PasswordUpdate) -> None:
        with self._audit.mutation("PASSWORD_CHANGED", "User", entity_id=getattr(self._session, "id", None)):
            user = self._current_user()
            if not security.verify_password(data.current_password, user.hashed_password):
                raise BadRequest("Incorrect current password")
            self._gateway.update(user, {"hashed_password": security.get_password_hash(data.new_password)})
