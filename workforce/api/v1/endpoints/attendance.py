# workforce/api/v1/endpoints/attendance.py
from typing import List

from fastapi import Depends, status

from workforce.api import deps
from workforce.core.procedures import ProcedureRouter, Tier
from workforce.schemas import attendance as attendance_schema
from workforce.services.attendance import AttendanceService

router = ProcedureRouter("attendance")


@router.procedure("check_in", tier=Tier.AUTHENTICATED, response_model=attendance_schema.Attendance)
def check_in(
    data: attendance_schema.CheckIn,
    attendance: AttendanceService = Depends(deps.get_attendance_service),
):
    """
    Opens today's attendance record. Arrivals after the configured cutoff are flagged late.
    """
    return attendance.check_in(data)


@router.procedure("check_out", tier=Tier.AUTHENTICATED, response_model=attendance_schema.Attendance)
def check_out(
    data: attendance_schema.CheckOut,
    attendance: AttendanceService = Depends(deps.get_attendance_service),
):
    return attendance.check_out(data)


@router.procedure("by_employee", tier=Tier.AUTHENTICATED, response_model=List[attendance_schema.Attendance])
def attendance_by_employee(
    query: attendance_schema.AttendanceQuery,
    attendance: AttendanceService = Depends(deps.get_attendance_service),
):
    return attendance.by_employee(query)


@router.procedure("today", tier=Tier.MANAGER, response_model=List[attendance_schema.AttendanceToday])
def attendance_today(attendance: AttendanceService = Depends(deps.get_attendance_service)):
    """ Everyone who has checked in today, earliest first. """
    return attendance.today()


@router.procedure("stats", tier=Tier.MANAGER, response_model=attendance_schema.AttendanceStats)
def attendance_stats(
    query: attendance_schema.AttendanceStatsQuery,
    attendance: AttendanceService = Depends(deps.get_attendance_service),
):
    return attendance.stats(query)


@router.procedure(
    "create_record", tier=Tier.ADMIN, response_model=attendance_schema.OnboardingReceipt,
    status_code=status.HTTP_201_CREATED,
)
def create_attendance_record(
    record: attendance_schema.OnboardingRecord,
    attendance: AttendanceService = Depends(deps.get_attendance_service),
):
    """ Files an onboarding record (identity, bank and salary details) for a new hire. """
    audit_log_id = attendance.create_record(record)
    return attendance_schema.OnboardingReceipt(audit_log_id=audit_log_id)
