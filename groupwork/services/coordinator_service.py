"""Coordinator assignment registry.

Responsibilities:
- At most one Coordinator per project (pre-check + unique key on project_id)
- Only admins holding the Coordinator role may be assigned
- Scoping Coordinator privileges to the project they are assigned to
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from groupwork.errors import Conflict, Forbidden, InvalidRole, NotFound
from groupwork.models.coordinator import CoordinatorProject
from groupwork.models.project import Project
from groupwork.models.user import Admin, AdminRole
from groupwork.principal import Principal, require_admin
from groupwork.services.common import commit_or_conflict
from groupwork.services.ports import CoordinatorQueries

logger = logging.getLogger(__name__)


class CoordinatorAssignments:
    """``CoordinatorQueries`` backed by the coordinator_projects table."""

    def __init__(self, db: Session):
        self.db = db

    def is_assigned(self, admin_id: int, project_id: int) -> bool:
        return (
            self.db.query(CoordinatorProject)
            .filter(CoordinatorProject.admin_id == admin_id, CoordinatorProject.project_id == project_id)
            .first()
            is not None
        )


def ensure_project_scope(principal: Principal, coordinators: CoordinatorQueries, project_id: int) -> None:
    """Root and Professor act on every project, a Coordinator only on their own."""
    require_admin(principal)
    if principal.is_root_or_professor:
        return
    if principal.is_coordinator and coordinators.is_assigned(principal.id, project_id):
        return
    logger.warning("Admin %s (%s) denied access to project %s", principal.id, principal.role, project_id)
    raise Forbidden("Access denied - you are not assigned to this project")


def _require_root_or_professor(principal: Principal) -> None:
    require_admin(principal)
    if not principal.is_root_or_professor:
        raise Forbidden("Only Root or Professor administrators may manage coordinators")


def _get_project(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.project_id == project_id).first()
    if not project:
        raise NotFound("Project not found")
    return project


def get_assignment(db: Session, project_id: int) -> Optional[CoordinatorProject]:
    return db.query(CoordinatorProject).filter(CoordinatorProject.project_id == project_id).first()


def assign(db: Session, principal: Principal, project_id: int, admin_id: int) -> CoordinatorProject:
    """Assign a Coordinator to a project that has none."""
    _require_root_or_professor(principal)
    _get_project(db, project_id)

    admin = db.query(Admin).filter(Admin.admin_id == admin_id).first()
    if not admin:
        raise NotFound("Admin not found")
    if admin.role != AdminRole.Coordinator:
        raise InvalidRole("Only Coordinators can be assigned to projects")

    existing = get_assignment(db, project_id)
    if existing:
        logger.warning(
            "Project %s already has coordinator %s; refused assignment of %s",
            project_id, existing.admin_id, admin_id,
        )
        raise Conflict("Project can only have one coordinator. Remove the existing coordinator first.")

    assignment = CoordinatorProject(admin_id=admin_id, project_id=project_id)
    db.add(assignment)
    commit_or_conflict(db, "Project can only have one coordinator. Remove the existing coordinator first.")
    db.refresh(assignment)
    logger.info("Assigned coordinator %s to project %s", admin_id, project_id)
    return assignment


def unassign(db: Session, principal: Principal, project_id: int, admin_id: int) -> None:
    _require_root_or_professor(principal)
    _get_project(db, project_id)

    assignment = (
        db.query(CoordinatorProject)
        .filter(CoordinatorProject.project_id == project_id, CoordinatorProject.admin_id == admin_id)
        .first()
    )
    if not assignment:
        raise NotFound("Coordinator not assigned to this project")
    db.delete(assignment)
    db.commit()
    logger.info("Removed coordinator %s from project %s", admin_id, project_id)


def get_for_project(db: Session, project_id: int) -> tuple[Project, Optional[CoordinatorProject]]:
    """Return the project and its coordinator assignment, if any."""
    project = _get_project(db, project_id)
    return project, get_assignment(db, project_id)


def projects_for(db: Session, admin_id: int) -> list[int]:
    rows = db.query(CoordinatorProject.project_id).filter(CoordinatorProject.admin_id == admin_id).all()
    return [row.project_id for row in rows]
