# workforce/services/projects.py
# Managers, the projects they own, and employee assignments on those projects.
from datetime import datetime
from typing import List, Optional

from workforce.core.enums import ProjectStatus
from workforce.core.errors import Conflict
from workforce.core.security import Session
from workforce.db.gateway import Gateway
from workforce.db.models import Employee, Manager, Project, ProjectAssignment
from workforce.schemas import admin as admin_schema
from workforce.services import aggregation
from workforce.services.audit import AuditTrail

PROJECT_INCLUDES = ("manager", "assignments.employee")


def project_view(project: Project, detail: bool = False):
    """ Attaches the derived completion figures to a project read. """
    progress = aggregation.project_progress(project.assignments)
    update = {
        "completion_percentage": progress.completion_percentage,
        "completed_assignments": progress.completed_assignments,
    }
    if not detail:
        return admin_schema.Project.model_validate(project).model_copy(update=update)

    view = admin_schema.ProjectDetail.model_validate(project)
    ordered = sorted(view.assignments, key=lambda a: (a.assigned_at, a.id), reverse=True)
    update.update(
        assignments=ordered,
        completed=[a for a in ordered if a.completion_percentage == aggregation.COMPLETE],
        pending=[a for a in ordered if a.completion_percentage < aggregation.COMPLETE],
    )
    return view.model_copy(update=update)


class ProjectService:
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

    # --- Managers ---

    def create_manager(self, data: admin_schema.ManagerCreate) -> Manager:
        with self._audit.mutation("MANAGER_CREATED", "Manager", name=data.name, email=data.email) as entry:
            if self._gateway.find_one(Manager, email=data.email) is not None:
                raise Conflict("Manager with this email already exists", {"field": "email"})
            manager = self._gateway.create(Manager, name=data.name, email=data.email, department=data.department)
            entry.target(manager)
        return self._gateway.get(Manager, manager.id, includes=("employees", "projects"))

    def list_managers(self) -> List[Manager]:
        return self._gateway.find(
            Manager, includes=("employees", "projects"), order_by=(Manager.created_at.desc(), Manager.id.desc())
        )

    # --- Projects ---

    def create_project(self, data: admin_schema.ProjectCreate):
        with self._audit.mutation(
            "PROJECT_CREATED", "Project", name=data.name, manager_id=data.manager_id,
        ) as entry:
            self._gateway.get(Manager, data.manager_id)
            project = self._gateway.create(
                Project,
                name=data.name,
                description=data.description or "",
                start_date=data.start_date,
                end_date=data.end_date,
                manager_id=data.manager_id,
                status=ProjectStatus.ACTIVE.value,
            )
            entry.target(project)
        return project_view(self._gateway.get(Project, project.id, includes=PROJECT_INCLUDES))

    def list_projects(self) -> list:
        projects = self._gateway.find(
            Project, includes=PROJECT_INCLUDES, order_by=(Project.created_at.desc(), Project.id.desc())
        )
        return [project_view(p) for p in projects]

    def project_detail(self, project_id: int):
        return project_view(self._gateway.get(Project, project_id, includes=PROJECT_INCLUDES), detail=True)

    # --- Assignments ---

    def assign(self, data: admin_schema.AssignProject) -> ProjectAssignment:
        with self._audit.mutation(
            "PROJECT_ASSIGNED", "ProjectAssignment", project_id=data.project_id, employee_id=data.employee_id,
        ) as entry:
            self._gateway.get(Project, data.project_id)
            self._gateway.get(Employee, data.employee_id)
            assignment = self._gateway.create(
                ProjectAssignment,
                project_id=data.project_id,
                employee_id=data.employee_id,
                task_description=data.task_description or "",
                completion_percentage=0,
                assigned_at=self._clock(),
            )
            entry.target(assignment)
        return self._gateway.get(ProjectAssignment, assignment.id, includes=("employee",))

    def update_progress(self, data: admin_schema.AssignmentProgress) -> ProjectAssignment:
        """ completed_at is set exactly while the assignment sits at 100%. """
        with self._audit.mutation(
            "ASSIGNMENT_PROGRESS_UPDATED", "ProjectAssignment", entity_id=data.assignment_id,
        ) as entry:
            assignment = self._gateway.get(ProjectAssignment, data.assignment_id, label="Assignment")
            old = assignment.completion_percentage
            if data.completion_percentage == aggregation.COMPLETE:
                completed_at = assignment.completed_at or self._clock()
            else:
                completed_at = None
            self._gateway.update(
                assignment,
                {"completion_percentage": data.completion_percentage, "completed_at": completed_at},
            )
            entry.metadata.update(
                project_id=assignment.project_id,
                old_percentage=old,
                new_percentage=data.completion_percentage,
            )
        return self._gateway.get(ProjectAssignment, assignment.id, includes=("employee",))
