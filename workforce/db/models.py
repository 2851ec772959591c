# workforce/db/models.py
from datetime import datetime

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

from workforce.core.enums import (
    AttendanceStatus, AuditOutcome, EmployeeStatus, Priority, ProjectStatus, Role, TaskStatus, one_of,
)

Base = declarative_base()


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(100))
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    # Ids are never reused once deleted.
    __table_args__ = (CheckConstraint(one_of("role", Role)), {"sqlite_autoincrement": True})
    employee = relationship("Employee", back_populates="user", uselist=False)

    @property
    def employee_id(self):
        return self.employee.id if self.employee is not None else None


class Manager(Base):
    __tablename__ = "managers"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    department = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    employees = relationship("Employee", back_populates="manager")
    projects = relationship("Project", back_populates="manager")


class Employee(Base):
    __tablename__ = "employees"
    id = Column(Integer, primary_key=True, index=True)
    sap_id = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    department = Column(String(100), nullable=False)
    position = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    status = Column(String(20), nullable=False, default=EmployeeStatus.ACTIVE.value)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=True)
    manager_id = Column(Integer, ForeignKey("managers.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
    __table_args__ = (
        CheckConstraint(one_of("role", Role)),
        CheckConstraint(one_of("status", EmployeeStatus)),
        {"sqlite_autoincrement": True},
    )
    user = relationship("User", back_populates="employee")
    manager = relationship("Manager", back_populates="employees")
    attendances = relationship("Attendance", back_populates="employee")
    tasks = relationship("Task", back_populates="employee", foreign_keys="Task.employee_id")
    assigned_tasks = relationship("Task", back_populates="assigned_by", foreign_keys="Task.assigned_by_id")
    project_assignments = relationship("ProjectAssignment", back_populates="employee")
    salary_records = relationship("SalaryRecord", back_populates="employee")


class Project(Base):
    __tablename__ = "projects"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default=ProjectStatus.ACTIVE.value)
    manager_id = Column(Integer, ForeignKey("managers.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    __table_args__ = (CheckConstraint(one_of("status", ProjectStatus)),)
    manager = relationship("Manager", back_populates="projects")
    assignments = relationship("ProjectAssignment", back_populates="project")


class ProjectAssignment(Base):
    __tablename__ = "project_assignments"
    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    completion_percentage = Column(Integer, nullable=False, default=0)
    task_description = Column(Text, nullable=False, default="")
    assigned_at = Column(DateTime, nullable=False, default=datetime.now)
    completed_at = Column(DateTime, nullable=True)
    __table_args__ = (
        CheckConstraint("completion_percentage BETWEEN 0 AND 100"),
        CheckConstraint(
            "(completion_percentage = 100 AND completed_at IS NOT NULL) "
            "OR (completion_percentage < 100 AND completed_at IS NULL)",
            name="ck_assignment_completed_at",
        ),
    )
    project = relationship("Project", back_populates="assignments")
    employee = relationship("Employee", back_populates="project_assignments")


class Attendance(Base):
    __tablename__ = "attendances"
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    check_in_time = Column(DateTime, nullable=False)
    check_out_time = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default=AttendanceStatus.PRESENT.value)
    is_late = Column(Boolean, nullable=False, default=False)
    location = Column(String(255), nullable=True)
    device_info = Column(String(255), nullable=True)
    ip_address = Column(String(64), nullable=True)
    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
        CheckConstraint(one_of("status", AttendanceStatus)),
    )
    employee = relationship("Employee", back_populates="attendances")


class Task(Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    assigned_by_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(String(20), nullable=False, default=Priority.MEDIUM.value)
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value)
    due_date = Column(DateTime, nullable=True)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    comments = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
    __table_args__ = (
        CheckConstraint(one_of("priority", Priority)),
        CheckConstraint(one_of("status", TaskStatus)),
    )
    employee = relationship("Employee", back_populates="tasks", foreign_keys=[employee_id])
    assigned_by = relationship("Employee", back_populates="assigned_tasks", foreign_keys=[assigned_by_id])


class SalaryRecord(Base):
    __tablename__ = "salary_records"
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    base_salary = Column(Float, nullable=False)
    attendance = Column(Float, nullable=False, default=0)
    completion = Column(Float, nullable=False, default=0)
    deduction = Column(Float, nullable=False, default=0)
    total_amount = Column(Float, nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="uq_salary_employee_period"),
        CheckConstraint("month BETWEEN 1 AND 12"),
    )
    employee = relationship("Employee", back_populates="salary_records")


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(50), nullable=True)
    user_name = Column(String(100), nullable=True)
    action = Column(String(64), nullable=False, index=True)
    entity = Column(String(64), nullable=False)
    entity_id = Column(String(50), nullable=True)
    ip_address = Column(String(64), nullable=True)
    # "metadata" is reserved on declarative classes.
    details = Column("metadata", JSON, nullable=False, default=dict)
    outcome = Column(String(10), nullable=False, default=AuditOutcome.SUCCESS.value)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    __table_args__ = (CheckConstraint(one_of("outcome", AuditOutcome)),)
