# workforce/schemas/admin.py
# Managers, projects, assignments and salary records.
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from workforce.core.enums import ProjectStatus
from workforce.schemas.employee import EmployeeSummary, ManagerRef


# --- Managers ---
class ManagerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    department: str = Field(min_length=1, max_length=100)

class ProjectBrief(BaseModel):
    id: int
    name: str
    status: ProjectStatus
    start_date: date
    end_date: Optional[date] = None

    class Config:
        from_attributes = True

class Manager(ManagerRef):
    created_at: datetime
    employees: List[EmployeeSummary] = []
    projects: List[ProjectBrief] = []


# --- Projects ---
class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    manager_id: int

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class ProjectId(BaseModel):
    project_id: int

class Assignment(BaseModel):
    id: int
    project_id: int
    employee_id: int
    completion_percentage: int
    task_description: str
    assigned_at: datetime
    completed_at: Optional[datetime] = None
    employee: EmployeeSummary

    class Config:
        from_attributes = True

class Project(BaseModel):
    id: int
    name: str
    description: str
    start_date: date
    end_date: Optional[date] = None
    status: ProjectStatus
    manager_id: int
    created_at: datetime
    manager: ManagerRef
    assignments: List[Assignment] = []
    completion_percentage: int = 0
    completed_assignments: int = 0

    class Config:
        from_attributes = True

class ProjectDetail(Project):
    completed: List[Assignment] = []
    pending: List[Assignment] = []


# --- Assignments ---
class AssignProject(BaseModel):
    project_id: int
    employee_id: int
    task_description: Optional[str] = None

class AssignmentProgress(BaseModel):
    assignment_id: int
    completion_percentage: int = Field(ge=0, le=100)


# --- Salary ---
class SalaryCalculation(BaseModel):
    employee_id: int
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000)
    base_salary: float = Field(gt=0)
    attendance: float = Field(default=0, ge=0)
    completion: float = Field(default=0, ge=0)
    deduction: float = Field(default=0, ge=0)

class SalaryScope(BaseModel):
    employee_id: Optional[int] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=2000)

class SalaryRecordId(BaseModel):
    salary_record_id: int

class SalaryRecord(BaseModel):
    id: int
    employee_id: int
    month: int
    year: int
    base_salary: float
    attendance: float
    completion: float
    deduction: float
    total_amount: float
    is_paid: bool
    employee: EmployeeSummary

    class Config:
        from_attributes = True

class SalaryOverview(BaseModel):
    total_owed: float
    total_paid: float
    pending_payments: int
    records: List[SalaryRecord]
