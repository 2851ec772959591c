# workforce/api/v1/endpoints/employee.py
from typing import List

from fastapi import Depends, status

from workforce.api import deps
from workforce.core.procedures import ProcedureRouter, Tier
from workforce.schemas import employee as employee_schema
from workforce.services.employees import EmployeeService

router = ProcedureRouter("employee")


@router.procedure(
    "create", tier=Tier.ADMIN, response_model=employee_schema.Employee, status_code=status.HTTP_201_CREATED
)
def create_employee(
    employee_in: employee_schema.EmployeeCreate,
    employees: EmployeeService = Depends(deps.get_employee_service),
):
    """ Creates a new employee profile. """
    return employees.create(employee_in)


@router.procedure("update", tier=Tier.ADMIN, response_model=employee_schema.Employee)
def update_employee(
    updates: employee_schema.EmployeeUpdate,
    employees: EmployeeService = Depends(deps.get_employee_service),
):
    """ Updates only the fields that are sent. """
    return employees.update(updates)


@router.procedure("delete", tier=Tier.ADMIN, response_model=employee_schema.DeleteResult)
def remove_employee(
    target: employee_schema.EmployeeId,
    employees: EmployeeService = Depends(deps.get_employee_service),
):
    """
    Deletes an employee, but only if nothing else still refers to them.
    """
    employees.delete(target.id)
    return employee_schema.DeleteResult(id=target.id)


@router.procedure("get_by_id", tier=Tier.AUTHENTICATED, response_model=employee_schema.EmployeeWithUser)
def get_employee(
    target: employee_schema.EmployeeId,
    employees: EmployeeService = Depends(deps.get_employee_service),
):
    return employees.get_by_id(target.id)


@router.procedure("list", tier=Tier.MANAGER, response_model=List[employee_schema.EmployeeWithUser])
def list_employees(
    query: employee_schema.EmployeeFilter,
    employees: EmployeeService = Depends(deps.get_employee_service),
):
    return employees.list_filtered(query)


@router.procedure("search", tier=Tier.MANAGER, response_model=List[employee_schema.EmployeeWithUser])
def search_employees(
    query: employee_schema.EmployeeSearch,
    employees: EmployeeService = Depends(deps.get_employee_service),
):
    return employees.search(query)
