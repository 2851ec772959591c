# workforce/services/employees.py
from sqlalchemy import or_

from workforce.core.enums import EmployeeStatus
from workforce.core.errors import Conflict, Forbidden
from workforce.core.procedures import is_self_or_manager
from workforce.core.security import Session
from workforce.db.gateway import Gateway
from workforce.db.models import Attendance, Employee, Manager, ProjectAssignment, SalaryRecord, Task
from workforce.schemas import employee as employee_schema
from workforce.services.audit import AuditTrail


class EmployeeService:
    def __init__(self, gateway: Gateway, session: Session, *, ip_address: str | None = None):
        self._gateway = gateway
        self._session = session
        self._audit = AuditTrail(gateway, session, ip_address)

    def create(self, data: employee_schema.EmployeeCreate) -> Employee:
        with self._audit.mutation("EMPLOYEE_CREATED", "Employee", sap_id=data.sap_id, name=data.name, email=data.email) as entry:
            existing = self._gateway.find_one(
                Employee, or_(Employee.sap_id == data.sap_id, Employee.email == data.email)
            )
            if existing is not None:
                field = "sap_id" if existing.sap_id == data.sap_id else "email"
                raise Conflict("Employee with this SAP ID or email already exists", {"field": field})
            if data.manager_id is not None:
                self._gateway.get(Manager, data.manager_id)

            employee = self._gateway.create(
                Employee,
                sap_id=data.sap_id,
                name=data.name,
                email=data.email,
                department=data.department,
                position=data.position,
                role=data.role.value,
                status=EmployeeStatus.ACTIVE.value,
                manager_id=data.manager_id,
            )
            entry.target(employee)
        return employee

    def update(self, data: employee_schema.EmployeeUpdate) -> Employee:
        """ Applies only the fields that were sent and audits only the ones that actually changed. """
        updates = data.model_dump(exclude_unset=True, exclude={"id"})
        with self._audit.mutation("EMPLOYEE_UPDATED", "Employee", entity_id=data.id) as entry:
            employee = self._gateway.get(Employee, data.id)

            if "email" in updates and updates["email"] != employee.email:
                clash = self._gateway.find_one(Employee, Employee.email == updates["email"], Employee.id != employee.id)
                if clash is not None:
                    raise Conflict("Another employee already uses this email", {"field": "email"})
            if updates.get("manager_id") is not None:
                self._gateway.get(Manager, updates["manager_id"])

            changes = {}
            for field, value in updates.items():
                value = getattr(value, "value", value)
                old = getattr(employee, field)
                if old != value:
                    changes[field] = {"from": old, "to": value}
            self._gateway.update(employee, {field: change["to"] for field, change in changes.items()})
            entry.metadata["changes"] = changes
        return employee

    def delete(self, employee_id: int) -> None:
        """
        Deletion is refused while attendance, tasks, project assignments or salary records
        still point at the employee. Set status INACTIVE instead to retire a profile.
        """
        with self._audit.mutation("EMPLOYEE_DELETED", "Employee", entity_id=employee_id) as entry:
            employee = self._gateway.get(Employee, employee_id)
            entry.metadata.update(sap_id=employee.sap_id, name=employee.name, email=employee.email)

            dependents = {
                "attendance": self._gateway.count(Attendance, employee_id=employee_id),
                "tasks": self._gateway.count(
                    Task, or_(Task.employee_id == employee_id, Task.assigned_by_id == employee_id)
                ),
                "project_assignments": self._gateway.count(ProjectAssignment, employee_id=employee_id),
                "salary_records": self._gateway.count(SalaryRecord, employee_id=employee_id),
            }
            blocking = {name: count for name, count in dependents.items() if count}
            if blocking:
                raise Conflict(
                    "Cannot delete employee with dependent records. Set status to INACTIVE instead.",
                    blocking,
                )
            self._gateway.delete(employee)

    def get_by_id(self, employee_id: int) -> Employee:
        if not is_self_or_manager(self._session, employee_id):
            raise Forbidden("You can only view your own profile")
        return self._gateway.get(Employee, employee_id, includes=("user",))

    def list_filtered(self, query: employee_schema.EmployeeFilter) -> list[Employee]:
        filters = {}
        if query.status:
            filters["status"] = query.status.value
        if query.department:
            filters["department"] = query.department
        return self._gateway.find(
            Employee, includes=("user",), order_by=(Employee.name.asc(),), limit=query.limit, **filters
        )

    def search(self, query: employee_schema.EmployeeSearch) -> list[Employee]:
        pattern = f"%{query.query}%"
        return self._gateway.find(
            Employee,
            or_(
                Employee.name.ilike(pattern),
                Employee.email.ilike(pattern),
                Employee.sap_id.ilike(pattern),
                Employee.department.ilike(pattern),
            ),
            includes=("user",),
            order_by=(Employee.name.asc(),),
            limit=query.limit,
        )

    def list_detailed(self) -> list[Employee]:
        return self._gateway.find(
            Employee,
            includes=("manager", "project_assignments.project"),
            order_by=(Employee.created_at.desc(), Employee.id.desc()),
        )
