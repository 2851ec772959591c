# workforce/services/attendance.py
import logging
from datetime import datetime, time
from typing import List, Optional

from workforce.core.enums import AttendanceStatus
from workforce.core.errors import BadRequest, Conflict, Forbidden
from workforce.core.procedures import is_self_or_manager
from workforce.core.security import Session
from workforce.db.gateway import Gateway
from workforce.db.models import Attendance, Employee
from workforce.schemas import attendance as attendance_schema
from workforce.services import aggregation
from workforce.services.audit import AuditTrail

logger = logging.getLogger(__name__)


class AttendanceService:
    """
    One attendance row per employee per calendar day: no row, then checked in, then checked out.
    The storage constraint on (employee_id, date) backs up the "already checked in" check.
    """

    def __init__(
        self,
        gateway: Gateway,
        session: Session,
        *,
        late_cutoff: time,
        now: Optional[datetime] = None,
        ip_address: Optional[str] = None,
    ):
        self._gateway = gateway
        self._session = session
        self._late_cutoff = late_cutoff
        self._now = now
        self._audit = AuditTrail(gateway, session, ip_address)

    def _clock(self) -> datetime:
        return self._now or datetime.now()

    def _authorize(self, employee_id: int) -> None:
        if not is_self_or_manager(self._session, employee_id):
            raise Forbidden("You can only record attendance for yourself")

    def check_in(self, data: attendance_schema.CheckIn) -> Attendance:
        now = self._clock()
        today = now.date()
        late = aggregation.is_late(now, self._late_cutoff)

        with self._audit.mutation(
            "ATTENDANCE_CHECKIN", "Attendance",
            employee_id=data.employee_id, is_late=late, location=data.location,
        ) as entry:
            self._authorize(data.employee_id)
            self._gateway.get(Employee, data.employee_id)

            existing = self._gateway.find_one(Attendance, employee_id=data.employee_id, date=today)
            if existing is not None:
                raise Conflict("Already checked in today", {"attendance_id": existing.id})

            try:
                record = self._gateway.create(
                    Attendance,
                    employee_id=data.employee_id,
                    date=today,
                    check_in_time=now,
                    status=AttendanceStatus.PRESENT.value,
                    is_late=late,
                    location=data.location,
                    device_info=data.device_info,
                    ip_address=data.ip_address,
                )
            except Conflict as exc:
                # Lost a race with a concurrent check-in for the same day.
                raise Conflict("Already checked in today") from exc
            entry.target(record)
        return self._gateway.get(Attendance, record.id, includes=("employee",))

    def check_out(self, data: attendance_schema.CheckOut) -> Attendance:
        now = self._clock()
        with self._audit.mutation(
            "ATTENDANCE_CHECKOUT", "Attendance", employee_id=data.employee_id, location=data.location,
        ) as entry:
            self._authorize(data.employee_id)
            record = self._gateway.find_one(
                Attendance,
                Attendance.check_out_time.is_(None),
                employee_id=data.employee_id,
                date=now.date(),
            )
            if record is None:
                raise BadRequest("No active check-in found for today")
            self._gateway.update(record, {"check_out_time": now})
            entry.target(record)
        return self._gateway.get(Attendance, record.id, includes=("employee",))

    def by_employee(self, query: attendance_schema.AttendanceQuery) -> List[Attendance]:
        if not is_self_or_manager(self._session, query.employee_id):
            raise Forbidden("You can only view your own attendance")
        criteria = []
        if query.start_date:
            criteria.append(Attendance.date >= query.start_date)
        if query.end_date:
            criteria.append(Attendance.date <= query.end_date)
        return self._gateway.find(
            Attendance,
            *criteria,
            includes=("employee",),
            order_by=(Attendance.date.desc(),),
            limit=query.limit,
            employee_id=query.employee_id,
        )

    def today(self) -> List[Attendance]:
        return self._gateway.find(
            Attendance,
            includes=("employee",),
            order_by=(Attendance.check_in_time.asc(),),
            date=self._clock().date(),
        )

    def stats(self, query: attendance_schema.AttendanceStatsQuery) -> dict:
        filters = {}
        if query.employee_id is not None:
            filters["employee_id"] = query.employee_id
        records = self._gateway.find(
            Attendance,
            Attendance.date >= query.start_date,
            Attendance.date <= query.end_date,
            **filters,
        )
        return aggregation.attendance_stats(records)

    def create_record(self, data: attendance_schema.OnboardingRecord) -> int:
        """
        Files an HR onboarding record. It is kept only as the metadata of its audit entry,
        whose id is returned.
        """
        with self._audit.mutation("ATTENDANCE_RECORD_CREATED", "AttendanceRecord", **data.model_dump()) as entry:
            logger.debug("Filing onboarding record for %s", data.email)
        return entry.audit_id
