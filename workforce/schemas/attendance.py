# workforce/schemas/attendance.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from workforce.core.enums import AttendanceStatus
from workforce.schemas.employee import EmployeeBrief, EmployeeSummary


class CheckIn(BaseModel):
    employee_id: int
    location: Optional[str] = Field(default=None, max_length=255)
    device_info: Optional[str] = Field(default=None, max_length=255)
    ip_address: Optional[str] = Field(default=None, max_length=64)

class CheckOut(BaseModel):
    employee_id: int
    location: Optional[str] = Field(default=None, max_length=255)

class DateRange(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class AttendanceQuery(DateRange):
    employee_id: int
    limit: int = Field(default=30, ge=1, le=100)

class AttendanceStatsQuery(DateRange):
    start_date: date
    end_date: date
    employee_id: Optional[int] = None


class Attendance(BaseModel):
    id: int
    employee_id: int
    date: date
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    status: AttendanceStatus
    is_late: bool
    location: Optional[str] = None
    device_info: Optional[str] = None
    ip_address: Optional[str] = None
    employee: EmployeeSummary

    class Config:
        from_attributes = True

class AttendanceToday(Attendance):
    employee: EmployeeBrief

class AttendanceStats(BaseModel):
    total_present: int
    total_absent: int
    total_late: int
    total: int
    attendance_rate: float


# --- Onboarding ---
class OnboardingRecord(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    father_name: str = Field(min_length=1, max_length=100)
    address: str = Field(min_length=1)
    email: EmailStr
    pan_number: str = Field(min_length=1, max_length=20)
    id_type: Optional[str] = None
    id_number: Optional[str] = None
    designation: str = Field(min_length=1, max_length=100)
    department: str = Field(min_length=1, max_length=100)
    company_branch: str = Field(min_length=1, max_length=100)
    employer_name: str = Field(min_length=1, max_length=200)
    previous_employer_name: Optional[str] = None
    pf_id: str = Field(min_length=1, max_length=50)
    bank_account_number: str = Field(min_length=1, max_length=50)
    bank_name: str = Field(min_length=1, max_length=100)
    ifsc_code: str = Field(min_length=1, max_length=20)
    bank_branch: str = Field(min_length=1, max_length=100)
    date_of_joining: date
    salary_per_month: float = Field(ge=0)

class OnboardingReceipt(BaseModel):
    success: bool = True
    message: str = "Attendance record created successfully"
    audit_log_id: int
