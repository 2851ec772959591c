# workforce/services/salary.py
from typing import Optional

from workforce.core.errors import Conflict
from workforce.core.security import Session
from workforce.db.gateway import Gateway
from workforce.db.models import Employee, SalaryRecord
from workforce.schemas import admin as admin_schema
from workforce.services import aggregation
from workforce.services.audit import AuditTrail

SALARY_ORDER = (SalaryRecord.year.desc(), SalaryRecord.month.desc(), SalaryRecord.id.desc())


class SalaryService:
    def __init__(self, gateway: Gateway, session: Session, *, ip_address: Optional[str] = None):
        self._gateway = gateway
        self._session = session
        self._audit = AuditTrail(gateway, session, ip_address)

    def calculate(self, data: admin_schema.SalaryCalculation) -> SalaryRecord:
        """
        Upserts the record for (employee, month, year). Recalculating overwrites the
        figures of an existing record and leaves its paid flag alone.
        """
        total = aggregation.salary_total(data.base_salary, data.attendance, data.completion, data.deduction)
        figures = {
            "base_salary": data.base_salary,
            "attendance": data.attendance,
            "completion": data.completion,
            "deduction": data.deduction,
            "total_amount": total,
        }
        with self._audit.mutation(
            "SALARY_CALCULATED", "SalaryRecord",
            employee_id=data.employee_id, month=data.month, year=data.year, total_amount=total,
        ) as entry:
            self._gateway.get(Employee, data.employee_id)
            record = self._gateway.find_one(
                SalaryRecord, employee_id=data.employee_id, month=data.month, year=data.year
            )
            if record is None:
                try:
                    record = self._gateway.create(
                        SalaryRecord,
                        employee_id=data.employee_id,
                        month=data.month,
                        year=data.year,
                        is_paid=False,
                        **figures,
                    )
                except Conflict as exc:
                    # A concurrent calculation inserted this period first.
                    raise Conflict(
                        "Salary record for this period already exists", {"month": data.month, "year": data.year}
                    ) from exc
                entry.metadata["recalculated"] = False
            else:
                self._gateway.update(record, figures)
                entry.metadata["recalculated"] = True
            entry.target(record)
        return self._gateway.get(SalaryRecord, record.id, includes=("employee",), label="Salary record")

    def overview(self, scope: admin_schema.SalaryScope) -> admin_schema.SalaryOverview:
        filters = {
            name: value
            for name, value in scope.model_dump().items()
            if value is not None
        }
        records = self._gateway.find(SalaryRecord, includes=("employee",), order_by=SALARY_ORDER, **filters)
        totals = aggregation.salary_totals(records)
        return admin_schema.SalaryOverview(
            total_owed=totals.total_owed,
            total_paid=totals.total_paid,
            pending_payments=totals.pending_payments,
            records=[admin_schema.SalaryRecord.model_validate(r) for r in records],
        )

    def mark_paid(self, salary_record_id: int) -> SalaryRecord:
        """ Marking an already paid record again is accepted and changes nothing. """
        with self._audit.mutation("SALARY_MARKED_PAID", "SalaryRecord", entity_id=salary_record_id) as entry:
            record = self._gateway.get(SalaryRecord, salary_record_id, label="Salary record")
            entry.metadata.update(
                employee_id=record.employee_id,
                month=record.month,
                year=record.year,
                total_amount=record.total_amount,
                already_paid=record.is_paid,
            )
            if not record.is_paid:
                self._gateway.update(record, {"is_paid": True})
        return self._gateway.get(SalaryRecord, record.id, includes=("employee",), label="Salary record")
