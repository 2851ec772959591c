# workforce/services/tasks.py
from datetime import datetime, time
from typing import List, Optional

from sqlalchemy import case

from workforce.core.enums import TaskStatus
from workforce.core.errors import Forbidden
from workforce.core.procedures import is_manager, is_self_or_manager
from workforce.core.security import Identified, Session
from workforce.db.gateway import Gateway
from workforce.db.models import Employee, Task
from workforce.schemas import task as task_schema
from workforce.services import aggregation
from workforce.services.audit import AuditTrail

TASK_INCLUDES = ("employee", "assigned_by")

# Priority strings do not sort by urgency, so rank them explicitly.
_PRIORITY_RANK = case(
    {"URGENT": 4, "HIGH": 3, "MEDIUM": 2, "LOW": 1},
    value=Task.priority,
    else_=0,
)
_TASK_ORDER = (_PRIORITY_RANK.desc(), Task.created_at.desc(), Task.id.desc())


class TaskService:
    def __init__(
        self,
        gateway: Gateway,
        session: Session,
        *,
        now: Optional[datetime] = None,
        ip_address: Optional[str] = None,
    ):
        self._gateway = gateway
        self._session = session
        self._now = now
        self._audit = AuditTrail(gateway, session, ip_address)

    def _clock(self) -> datetime:
        return self._now or datetime.now()

    @property
    def _employee_id(self) -> Optional[int]:
        return self._session.employee_id if isinstance(self._session, Identified) else None

    def _may_update(self, task: Task) -> bool:
        if is_manager(self._session):
            return True
        me = self._employee_id
        # A caller without an employee profile never owns a task.
        return me is not None and me in (task.employee_id, task.assigned_by_id)

    def create(self, data: task_schema.TaskCreate) -> Task:
        with self._audit.mutation(
            "TASK_CREATED", "Task",
            task_title=data.title, assigned_to=data.employee_id, priority=data.priority.value,
        ) as entry:
            self._gateway.get(Employee, data.employee_id)
            task = self._gateway.create(
                Task,
                employee_id=data.employee_id,
                assigned_by_id=self._employee_id,
                title=data.title,
                description=data.description,
                priority=data.priority.value,
                due_date=data.due_date,
                status=TaskStatus.PENDING.value,
                attachments=[],
            )
            entry.target(task)
        return self._gateway.get(Task, task.id, includes=TASK_INCLUDES)

    def update_status(self, data: task_schema.TaskStatusUpdate) -> Task:
        """
        startedAt and completedAt are stamped the first time a task enters IN_PROGRESS or
        COMPLETED and are never overwritten afterwards.
        """
        now = self._clock()
        with self._audit.mutation("TASK_STATUS_UPDATED", "Task", entity_id=data.task_id) as entry:
            task = self._gateway.get(Task, data.task_id)
            if not self._may_update(task):
                raise Forbidden("Only the assignee, the assigner or a manager can update this task")

            old_status = task.status
            changes = {"status": data.status.value}
            if data.comments:
                changes["comments"] = data.comments
            if data.attachments is not None:
                changes["attachments"] = list(data.attachments)
            if data.status is TaskStatus.IN_PROGRESS and task.started_at is None:
                changes["started_at"] = now
            if data.status is TaskStatus.COMPLETED and task.completed_at is None:
                changes["completed_at"] = now

            self._gateway.update(task, changes)
            entry.metadata.update(old_status=old_status, new_status=data.status.value, task_title=task.title)
        return self._gateway.get(Task, task.id, includes=TASK_INCLUDES)

    def delete(self, task_id: int) -> None:
        with self._audit.mutation("TASK_DELETED", "Task", entity_id=task_id) as entry:
            task = self._gateway.get(Task, task_id)
            entry.metadata.update(task_title=task.title, task_status=task.status)
            self._gateway.delete(task)

    def by_employee(self, query: task_schema.TaskByEmployee) -> List[Task]:
        if not is_self_or_manager(self._session, query.employee_id):
            raise Forbidden("You can only view your own tasks")
        filters = {"employee_id": query.employee_id}
        if query.status:
            filters["status"] = query.status.value
        return self._gateway.find(
            Task, includes=TASK_INCLUDES, order_by=_TASK_ORDER, limit=query.limit, **filters
        )

    def list_filtered(self, query: task_schema.TaskFilter) -> List[Task]:
        filters = {}
        if query.status:
            filters["status"] = query.status.value
        if query.priority:
            filters["priority"] = query.priority.value
        return self._gateway.find(
            Task, includes=TASK_INCLUDES, order_by=_TASK_ORDER, limit=query.limit, **filters
        )

    def stats(self, query: task_schema.TaskStatsQuery) -> dict:
        criteria = []
        if query.start_date:
            criteria.append(Task.created_at >= datetime.combine(query.start_date, time.min))
        if query.end_date:
            criteria.append(Task.created_at <= datetime.combine(query.end_date, time.max))
        filters = {}
        if query.employee_id is not None:
            filters["employee_id"] = query.employee_id
        return aggregation.task_stats(self._gateway.find(Task, *criteria, **filters))

