# workforce/api/v1/endpoints/task.py
from typing import List

from fastapi import Depends, status

from workforce.api import deps
from workforce.core.procedures import ProcedureRouter, Tier
from workforce.schemas import task as task_schema
from workforce.schemas.user import Ack
from workforce.services.tasks import TaskService

router = ProcedureRouter("task")


@router.procedure("create", tier=Tier.MANAGER, response_model=task_schema.Task, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: task_schema.TaskCreate,
    tasks: TaskService = Depends(deps.get_task_service),
):
    """ Assigns a new task to an employee. The caller is recorded as the assigner. """
    return tasks.create(task_in)


@router.procedure("update_status", tier=Tier.AUTHENTICATED, response_model=task_schema.Task)
def update_task_status(
    update: task_schema.TaskStatusUpdate,
    tasks: TaskService = Depends(deps.get_task_service),
):
    return tasks.update_status(update)


@router.procedure("by_employee", tier=Tier.AUTHENTICATED, response_model=List[task_schema.Task])
def tasks_by_employee(
    query: task_schema.TaskByEmployee,
    tasks: TaskService = Depends(deps.get_task_service),
):
    return tasks.by_employee(query)


@router.procedure("list", tier=Tier.MANAGER, response_model=List[task_schema.Task])
def list_tasks(
    query: task_schema.TaskFilter,
    tasks: TaskService = Depends(deps.get_task_service),
):
    return tasks.list_filtered(query)


@router.procedure("stats", tier=Tier.MANAGER, response_model=task_schema.TaskStats)
def task_stats(
    query: task_schema.TaskStatsQuery,
    tasks: TaskService = Depends(deps.get_task_service),
):
    return tasks.stats(query)


@router.procedure("delete", tier=Tier.MANAGER, response_model=Ack)
def delete_task(
    target: task_schema.TaskId,
    tasks: TaskService = Depends(deps.get_task_service),
):
    tasks.delete(target.task_id)
    return Ack()
