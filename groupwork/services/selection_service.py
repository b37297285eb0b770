"""Deliverable selection service.

Two independent flows share the deadline rule (open while ``now <= deadline``,
always open when the project has no deadline):

- group selection: chosen once by the GroupLeader; the deliverable id is
  write-once, only the link and markdown text change afterwards
- student selection: one per (student, project), requires group membership
  in that project and stays mutable until the deadline
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from groupwork.errors import Conflict, Forbidden, InvalidInput, InvalidState, NotFound
from groupwork.models.group import Group
from groupwork.models.project import GroupDeliverable, Project, StudentDeliverable
from groupwork.models.selection import GroupDeliverableSelection, StudentDeliverableSelection
from groupwork.principal import Principal, require_student
from groupwork.services.common import commit_or_conflict, selection_window_open
from groupwork.services.coordinator_service import ensure_project_scope
from groupwork.services.ports import CoordinatorQueries, MembershipQueries

logger = logging.getLogger(__name__)

DEADLINE_PASSED = "The deliverable selection deadline for this project has passed"


def _get_project(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.project_id == project_id).first()
    if not project:
        raise NotFound("Project not found")
    return project


def _require_leader(principal: Principal, membership: MembershipQueries, group_id: int) -> None:
    require_student(principal)
    if not membership.is_group_leader(principal.id, group_id):
        logger.warning("Student %s is not the GroupLeader of group %s", principal.id, group_id)
        raise Forbidden("Only the group leader can manage the group's deliverable selection")


def _require_member(principal: Principal, membership: MembershipQueries, project_id: int) -> None:
    require_student(principal)
    if not membership.is_student_in_project(principal.id, project_id):
        raise Forbidden("You must belong to a group in this project to select a deliverable")


def _ensure_open(project: Project, now: Optional[datetime]) -> None:
    if not selection_window_open(project, now):
        raise InvalidState(DEADLINE_PASSED)


# ---------------------------------------------------------------------------
# Group selection
# ---------------------------------------------------------------------------
def find_group_selection(db: Session, group_id: int) -> Optional[GroupDeliverableSelection]:
    return (
        db.query(GroupDeliverableSelection)
        .filter(GroupDeliverableSelection.group_id == group_id)
        .first()
    )


def create_group_selection(
    db: Session,
    principal: Principal,
    membership: MembershipQueries,
    group_id: int,
    group_deliverable_id: int,
    now: Optional[datetime] = None,
) -> GroupDeliverableSelection:
    _require_leader(principal, membership, group_id)

    group = db.query(Group).filter(Group.group_id == group_id).first()
    if not group:
        raise NotFound("Group not found")
    if find_group_selection(db, group_id):
        raise Conflict("This group has already selected a deliverable")

    deliverable = (
        db.query(GroupDeliverable)
        .filter(GroupDeliverable.group_deliverable_id == group_deliverable_id)
        .first()
    )
    if not deliverable or deliverable.project_id != group.project_id:
        raise NotFound("Group deliverable not found for this project")
    _ensure_open(_get_project(db, group.project_id), now)

    selection = GroupDeliverableSelection(group_id=group_id, group_deliverable_id=group_deliverable_id)
    db.add(selection)
    commit_or_conflict(db, "This group has already selected a deliverable")
    db.refresh(selection)
    logger.info("Group %s selected deliverable %s", group_id, group_deliverable_id)
    return selection


def update_group_selection(
    db: Session,
    principal: Principal,
    membership: MembershipQueries,
    group_id: int,
    link: str,
    markdown_text: str,
) -> GroupDeliverableSelection:
    """Change the link and markdown text. The chosen deliverable never changes."""
    _require_leader(principal, membership, group_id)
    link = (link or "").strip()
    if not link or not (markdown_text or "").strip():
        raise InvalidInput("Link and markdown text are mandatory")

    selection = find_group_selection(db, group_id)
    if not selection:
        raise NotFound("No deliverable selection found for this group")

    taken = (
        db.query(GroupDeliverableSelection)
        .filter(
            GroupDeliverableSelection.link == link,
            GroupDeliverableSelection.group_id != group_id,
        )
        .first()
    )
    if taken:
        raise Conflict("This link is already used by another group")

    selection.link = link
    selection.markdown_text = markdown_text
    commit_or_conflict(db, "This link is already used by another group")
    db.refresh(selection)
    logger.info("Group %s updated its deliverable selection %s", group_id, selection.group_deliverable_selection_id)
    return selection


def get_group_selection(db: Session, group_id: int) -> GroupDeliverableSelection:
    selection = find_group_selection(db, group_id)
    if not selection:
        raise NotFound("No deliverable selection found for this group")
    return selection


def list_project_group_selections(
    db: Session, principal: Principal, coordinators: CoordinatorQueries, project_id: int
) -> list[GroupDeliverableSelection]:
    """Admin overview of every group selection in a project, details included."""
    ensure_project_scope(principal, coordinators, project_id)
    _get_project(db, project_id)
    return (
        db.query(GroupDeliverableSelection)
        .join(Group, Group.group_id == GroupDeliverableSelection.group_id)
        .filter(Group.project_id == project_id)
        .order_by(Group.name)
        .all()
    )


# ---------------------------------------------------------------------------
# Student selection
# ---------------------------------------------------------------------------
def find_student_selection(db: Session, student_id: int, project_id: int) -> Optional[StudentDeliverableSelection]:
    return (
        db.query(StudentDeliverableSelection)
        .filter(
            StudentDeliverableSelection.student_id == student_id,
            StudentDeliverableSelection.project_id == project_id,
        )
        .first()
    )


def _get_student_deliverable(db: Session, student_deliverable_id: int, project_id: int) -> StudentDeliverable:
    deliverable = (
        db.query(StudentDeliverable)
        .filter(StudentDeliverable.student_deliverable_id == student_deliverable_id)
        .first()
    )
    if not deliverable or deliverable.project_id != project_id:
        raise NotFound("Student deliverable not found for this project")
    return deliverable


def create_student_selection(
    db: Session,
    principal: Principal,
    membership: MembershipQueries,
    student_deliverable_id: int,
    project_id: int,
    now: Optional[datetime] = None,
) -> StudentDeliverableSelection:
    project = _get_project(db, project_id)
    _require_member(principal, membership, project_id)
    if find_student_selection(db, principal.id, project_id):
        raise Conflict("You already selected a deliverable for this project, update it instead")
    _get_student_deliverable(db, student_deliverable_id, project_id)
    _ensure_open(project, now)

    selection = StudentDeliverableSelection(
        student_id=principal.id,
        project_id=project_id,
        student_deliverable_id=student_deliverable_id,
    )
    db.add(selection)
    commit_or_conflict(db, "You already selected a deliverable for this project, update it instead")
    db.refresh(selection)
    logger.info("Student %s selected deliverable %s in project %s", principal.id, student_deliverable_id, project_id)
    return selection


def update_student_selection(
    db: Session,
    principal: Principal,
    membership: MembershipQueries,
    student_deliverable_id: int,
    project_id: int,
    now: Optional[datetime] = None,
) -> StudentDeliverableSelection:
    project = _get_project(db, project_id)
    _require_member(principal, membership, project_id)
    selection = find_student_selection(db, principal.id, project_id)
    if not selection:
        raise NotFound("No deliverable selection found for this project")
    _get_student_deliverable(db, student_deliverable_id, project_id)
    _ensure_open(project, now)

    selection.student_deliverable_id = student_deliverable_id
    db.commit()
    db.refresh(selection)
    logger.info("Student %s changed deliverable to %s in project %s", principal.id, student_deliverable_id, project_id)
    return selection


def delete_student_selection(db: Session, principal: Principal, project_id: int) -> None:
    require_student(principal)
    selection = find_student_selection(db, principal.id, project_id)
    if not selection:
        raise NotFound("No deliverable selection found for this project")
    db.delete(selection)
    db.commit()
    logger.info("Student %s deleted deliverable selection in project %s", principal.id, project_id)


def delete_student_selection_for(db: Session, student_id: int, project_id: int) -> bool:
    """Drop a student's selection when they leave their group. Missing is fine."""
    selection = find_student_selection(db, student_id, project_id)
    if not selection:
        return False
    db.delete(selection)
    db.commit()
    logger.info("Deleted deliverable selection of student %s in project %s", student_id, project_id)
    return True


def get_student_selection(db: Session, principal: Principal, project_id: int) -> StudentDeliverableSelection:
    require_student(principal)
    selection = find_student_selection(db, principal.id, project_id)
    if not selection:
        raise NotFound("No deliverable selection found for this project")
    return selection


def list_project_student_selections(
    db: Session, principal: Principal, coordinators: CoordinatorQueries, project_id: int
) -> list[StudentDeliverableSelection]:
    ensure_project_scope(principal, coordinators, project_id)
    _get_project(db, project_id)
    return (
        db.query(StudentDeliverableSelection)
        .filter(StudentDeliverableSelection.project_id == project_id)
        .order_by(StudentDeliverableSelection.student_id)
        .all()
    )
