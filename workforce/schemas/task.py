# workforce/schemas/task.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from workforce.core.enums import Priority, TaskStatus
from workforce.schemas.employee import EmployeeSummary


class TaskCreate(BaseModel):
    employee_id: int
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None

class TaskStatusUpdate(BaseModel):
    task_id: int
    status: TaskStatus
    comments: Optional[str] = None
    attachments: Optional[List[str]] = None

class TaskId(BaseModel):
    task_id: int

class TaskByEmployee(BaseModel):
    employee_id: int
    status: Optional[TaskStatus] = None
    limit: int = Field(default=50, ge=1, le=100)

class TaskFilter(BaseModel):
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    limit: int = Field(default=50, ge=1, le=100)

class TaskStatsQuery(BaseModel):
    employee_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class AssignerRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

class Task(BaseModel):
    id: int
    employee_id: int
    assigned_by_id: Optional[int] = None
    title: str
    description: str
    priority: Priority
    status: TaskStatus
    due_date: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    comments: Optional[str] = None
    attachments: List[str] = []
    created_at: datetime
    employee: EmployeeSummary
    assigned_by: Optional[AssignerRef] = None

    class Config:
        from_attributes = True

class TaskStats(BaseModel):
    total_pending: int
    total_in_progress: int
    total_completed: int
    total_cancelled: int
    total: int
    completion_rate: float
