# workforce/api/v1/endpoints/admin.py
from typing import List

from fastapi import Depends, status

from workforce.api import deps
from workforce.core.procedures import ProcedureRouter, Tier
from workforce.schemas import admin as admin_schema
from workforce.schemas import employee as employee_schema
from workforce.schemas import user as user_schema
from workforce.services.employees import EmployeeService
from workforce.services.projects import ProjectService
from workforce.services.salary import SalaryService
from workforce.services.users import UserService

router = ProcedureRouter("admin")


# --- Employees & Users ---

@router.procedure("list_employees", tier=Tier.ADMIN, response_model=List[employee_schema.EmployeeDetail])
def get_all_employees(employees: EmployeeService = Depends(deps.get_employee_service)):
    """ Retrieves every employee with their manager and project assignments. """
    return employees.list_detailed()


@router.procedure(
    "create_user", tier=Tier.ADMIN, response_model=user_schema.User, status_code=status.HTTP_201_CREATED
)
def create_user(
    user_in: user_schema.UserCreate,
    users: UserService = Depends(deps.get_user_service),
):
    """ Creates a new login account. """
    return users.create(user_in)


# --- Managers ---

@router.procedure(
    "create_manager", tier=Tier.ADMIN, response_model=admin_schema.Manager, status_code=status.HTTP_201_CREATED
)
def create_manager(
    manager_in: admin_schema.ManagerCreate,
    projects: ProjectService = Depends(deps.get_project_service),
):
    return projects.create_manager(manager_in)


@router.procedure("list_managers", tier=Tier.ADMIN, response_model=List[admin_schema.Manager])
def get_all_managers(projects: ProjectService = Depends(deps.get_project_service)):
    """ Retrieves all managers with their teams and projects. """
    return projects.list_managers()


# --- Projects ---

@router.procedure(
    "create_project", tier=Tier.MANAGER, response_model=admin_schema.Project, status_code=status.HTTP_201_CREATED
)
def create_project(
    project_in: admin_schema.ProjectCreate,
    projects: ProjectService = Depends(deps.get_project_service),
):
    return projects.create_project(project_in)


@router.procedure("list_projects", tier=Tier.MANAGER, response_model=List[admin_schema.Project])
def get_all_projects(projects: ProjectService = Depends(deps.get_project_service)):
    return projects.list_projects()


@router.procedure("project_detail", tier=Tier.MANAGER, response_model=admin_schema.ProjectDetail)
def get_project_detail(
    target: admin_schema.ProjectId,
    projects: ProjectService = Depends(deps.get_project_service),
):
    """ A project with its assignments split into completed and pending. """
    return projects.project_detail(target.project_id)


@router.procedure(
    "assign_project", tier=Tier.MANAGER, response_model=admin_schema.Assignment, status_code=status.HTTP_201_CREATED
)
def assign_project(
    assignment_in: admin_schema.AssignProject,
    projects: ProjectService = Depends(deps.get_project_service),
):
    return projects.assign(assignment_in)


@router.procedure("update_assignment_progress", tier=Tier.MANAGER, response_model=admin_schema.Assignment)
def update_assignment_progress(
    progress: admin_schema.AssignmentProgress,
    projects: ProjectService = Depends(deps.get_project_service),
):
    return projects.update_progress(progress)


# --- Salary ---

@router.procedure("salary_overview", tier=Tier.ADMIN, response_model=admin_schema.SalaryOverview)
def salary_overview(
    scope: admin_schema.SalaryScope,
    salaries: SalaryService = Depends(deps.get_salary_service),
):
    """ Owed and paid totals, optionally narrowed to one employee, month or year. """
    return salaries.overview(scope)


@router.procedure("calculate_salary", tier=Tier.ADMIN, response_model=admin_schema.SalaryRecord)
def calculate_salary(
    calculation: admin_schema.SalaryCalculation,
    salaries: SalaryService = Depends(deps.get_salary_service),
):
    return salaries.calculate(calculation)


@router.procedure("mark_salary_paid", tier=Tier.ADMIN, response_model=admin_schema.SalaryRecord)
def mark_salary_paid(
    target: admin_schema.SalaryRecordId,
    salaries: SalaryService = Depends(deps.get_salary_service),
):
    return salaries.mark_paid(target.salary_record_id)
