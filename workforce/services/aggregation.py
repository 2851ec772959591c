# workforce/services/aggregation.py
# Derived figures, recomputed from child rows on every read and never stored.
from dataclasses import dataclass
from datetime import datetime, time
from typing import Iterable, Sequence

from workforce.core.enums import AttendanceStatus, TaskStatus

COMPLETE = 100


@dataclass(frozen=True)
class ProjectProgress:
    completion_percentage: int
    completed_assignments: int
    total_assignments: int


@dataclass(frozen=True)
class SalaryTotals:
    total_owed: float
    total_paid: float
    pending_payments: int


def round_half_up_mean(values: Sequence[int]) -> int:
    """ Mean of non-negative integers, rounded half-up without going through floats. """
    if not values:
        return 0
    total, n = sum(values), len(values)
    return (2 * total + n) // (2 * n)


def project_progress(assignments: Iterable) -> ProjectProgress:
    percentages = [a.completion_percentage for a in assignments]
    return ProjectProgress(
        completion_percentage=round_half_up_mean(percentages),
        completed_assignments=sum(1 for p in percentages if p == COMPLETE),
        total_assignments=len(percentages),
    )


def salary_totals(records: Iterable) -> SalaryTotals:
    total_owed = 0.0
    total_paid = 0.0
    pending = 0
    for record in records:
        if record.is_paid:
            total_paid += record.total_amount
        else:
            total_owed += record.total_amount
            pending += 1
    return SalaryTotals(total_owed=total_owed, total_paid=total_paid, pending_payments=pending)


def salary_total(base_salary: float, attendance: float, completion: float, deduction: float) -> float:
    return base_salary + attendance + completion - deduction


def is_late(check_in_time: datetime, cutoff: time) -> bool:
    """ Late means strictly after the cutoff; arriving exactly on it is on time. """
    return check_in_time.time() > cutoff


def attendance_stats(records: Sequence) -> dict:
    total = len(records)
    present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT.value)
    absent = sum(1 for r in records if r.status == AttendanceStatus.ABSENT.value)
    late = sum(1 for r in records if r.is_late)
    return {
        "total_present": present,
        "total_absent": absent,
        "total_late": late,
        "total": total,
        "attendance_rate": (present / total) * 100 if total > 0 else 0.0,
    }


def task_stats(tasks: Sequence) -> dict:
    total = len(tasks)
    by_status = {status: 0 for status in TaskStatus}
    for task in tasks:
        by_status[TaskStatus(task.status)] += 1
    completed = by_status[TaskStatus.COMPLETED]
    return {
        "total_pending": by_status[TaskStatus.PENDING],
        "total_in_progress": by_status[TaskStatus.IN_PROGRESS],
        "total_completed": completed,
        "total_cancelled": by_status[TaskStatus.CANCELLED],
        "total": total,
        "completion_rate": (completed / total) * 100 if total > 0 else 0.0,
    }
