# workforce/api/deps.py
from datetime import datetime

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from workforce.core.config import settings
from workforce.core.security import Session as AuthSession, get_session
from workforce.db.gateway import Gateway
from workforce.db.session import get_db
from workforce.services.attendance import AttendanceService
from workforce.services.employees import EmployeeService
from workforce.services.projects import ProjectService
from workforce.services.salary import SalaryService
from workforce.services.tasks import TaskService
from workforce.services.users import UserService


def get_gateway(db: Session = Depends(get_db)) -> Gateway:
    return Gateway(db)


def get_now() -> datetime:
    """ Local wall-clock time; overridden in tests. """
    return datetime.now()


def get_client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


# --- Services ---

def get_user_service(
    gateway: Gateway = Depends(get_gateway),
    session: AuthSession = Depends(get_session),
    ip_address: str | None = Depends(get_client_ip),
) -> UserService:
    return UserService(gateway, session, ip_address=ip_address)


def get_employee_service(
    gateway: Gateway = Depends(get_gateway),
    session: AuthSession = Depends(get_session),
    ip_address: str | None = Depends(get_client_ip),
) -> EmployeeService:
    return EmployeeService(gateway, session, ip_address=ip_address)


def get_attendance_service(
    gateway: Gateway = Depends(get_gateway),
    session: AuthSession = Depends(get_session),
    now: datetime = Depends(get_now),
    ip_address: str | None = Depends(get_client_ip),
) -> AttendanceService:
    return AttendanceService(
        gateway, session, late_cutoff=settings.LATE_CUTOFF, now=now, ip_address=ip_address
    )


def get_task_service(
    gateway: Gateway = Depends(get_gateway),
    session: AuthSession = Depends(get_session),
    now: datetime = Depends(get_now),
    ip_address: str | None = Depends(get_client_ip),
) -> TaskService:
    return TaskService(gateway, session, now=now, ip_address=ip_address)


def get_project_service(
    gateway: Gateway = Depends(get_gateway),
    session: AuthSession = Depends(get_session),
    now: datetime = Depends(get_now),
    ip_address: str | None = Depends(get_client_ip),
) -> ProjectService:
    return ProjectService(gateway, session, now=now, ip_address=ip_address)


def get_salary_service(
    gateway: Gateway = Depends(get_gateway),
    session: AuthSession = Depends(get_session),
    ip_address: str | None = Depends(get_client_ip),
) -> SalaryService:
    return SalaryService(gateway, session, ip_address=ip_address)
