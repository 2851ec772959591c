# workforce/schemas/employee.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from workforce.core.enums import EmployeeStatus, Role


class EmployeeCreate(BaseModel):
    sap_id: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    department: str = Field(min_length=1, max_length=100)
    position: str = Field(min_length=1, max_length=100)
    role: Role = Role.EMPLOYEE
    manager_id: Optional[int] = None

class EmployeeUpdate(BaseModel):
    id: int
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    department: Optional[str] = Field(default=None, min_length=1, max_length=100)
    position: Optional[str] = Field(default=None, min_length=1, max_length=100)
    role: Optional[Role] = None
    status: Optional[EmployeeStatus] = None
    manager_id: Optional[int] = None

    @field_validator("name", "email", "department", "position", "role", "status")
    @classmethod
    def not_null(cls, value):
        # Omit a field to leave it unchanged; only manager_id can be cleared.
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

class EmployeeId(BaseModel):
    id: int

class EmployeeFilter(BaseModel):
    status: Optional[EmployeeStatus] = None
    department: Optional[str] = None
    limit: int = Field(default=100, ge=1, le=200)

class EmployeeSearch(BaseModel):
    query: str = Field(min_length=1)
    limit: int = Field(default=20, ge=1, le=50)


class EmployeeSummary(BaseModel):
    id: int
    name: str
    sap_id: str

    class Config:
        from_attributes = True

class EmployeeBrief(EmployeeSummary):
    department: str
    position: str

class LinkedUser(BaseModel):
    id: int
    email: str
    name: Optional[str] = None

    class Config:
        from_attributes = True

class Employee(BaseModel):
    id: int
    sap_id: str
    name: str
    email: str
    department: str
    position: str
    role: Role
    status: EmployeeStatus
    user_id: Optional[int] = None
    manager_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class EmployeeWithUser(Employee):
    user: Optional[LinkedUser] = None

class DeleteResult(BaseModel):
    success: bool = True
    id: int


class ManagerRef(BaseModel):
    id: int
    name: str
    email: str
    department: str

    class Config:
        from_attributes = True

class ProjectRef(BaseModel):
    id: int
    name: str
    status: str

    class Config:
        from_attributes = True

class AssignmentWithProject(BaseModel):
    id: int
    completion_percentage: int
    task_description: str
    assigned_at: datetime
    completed_at: Optional[datetime] = None
    project: ProjectRef

    class Config:
        from_attributes = True

class EmployeeDetail(Employee):
    manager: Optional[ManagerRef] = None
    project_assignments: List[AssignmentWithProject] = []
