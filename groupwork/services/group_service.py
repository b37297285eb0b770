"""Group lifecycle service: enforces the membership and leadership invariants.

Responsibilities:
- Group creation gated by a valid security code, creator becomes GroupLeader
- One group per student per project (pre-check + unique key)
- Exactly one GroupLeader per group (pre-check + partial unique index)
- Self-service membership management by the leader, administrative overrides
- Leadership transfer applied atomically
"""
import logging
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from groupwork.errors import Conflict, Forbidden, InvalidInput, InvalidState, NotFound
from groupwork.models.group import Group, GroupMember, StudentRole
from groupwork.models.project import Project
from groupwork.models.user import Student
from groupwork.principal import Principal, require_admin, require_student
from groupwork.services import security_code_service, selection_service
from groupwork.services.common import commit_or_conflict
from groupwork.services.coordinator_service import ensure_project_scope
from groupwork.services.ports import CoordinatorQueries

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Read helpers
# ---------------------------------------------------------------------------
def is_group_leader(db: Session, student_id: int, group_id: int) -> bool:
    return (
        db.query(GroupMember)
        .filter(
            GroupMember.group_id == group_id,
            GroupMember.student_id == student_id,
            GroupMember.role == StudentRole.GroupLeader,
        )
        .first()
        is not None
    )


def is_student_in_project(db: Session, student_id: int, project_id: int) -> bool:
    return (
        db.query(GroupMember)
        .filter(GroupMember.student_id == student_id, GroupMember.project_id == project_id)
        .first()
        is not None
    )


def get_group_members(db: Session, group_id: int) -> list[GroupMember]:
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group_id)
        .order_by(GroupMember.joined_at, GroupMember.student_id)
        .all()
    )


def count_members(db: Session, group_id: int) -> int:
    return db.query(func.count(GroupMember.student_id)).filter(GroupMember.group_id == group_id).scalar()


def get_leader(db: Session, group_id: int) -> Optional[GroupMember]:
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.role == StudentRole.GroupLeader)
        .first()
    )


def name_exists(db: Session, project_id: int, name: str) -> bool:
    return (
        db.query(Group).filter(Group.project_id == project_id, Group.name == name.strip()).first()
        is not None
    )


class GroupMembership:
    """``MembershipQueries`` backed by the group_members table."""

    def __init__(self, db: Session):
        self.db = db

    def is_group_leader(self, student_id: int, group_id: int) -> bool:
        return is_group_leader(self.db, student_id, group_id)

    def is_student_in_project(self, student_id: int, project_id: int) -> bool:
        return is_student_in_project(self.db, student_id, project_id)


def _get_group(db: Session, group_id: int) -> Group:
    group = db.query(Group).filter(Group.group_id == group_id).first()
    if not group:
        raise NotFound("Group not found")
    return group


def get_group(db: Session, group_id: int) -> Group:
    return _get_group(db, group_id)


def _get_student_by_email(db: Session, email: str) -> Student:
    student = db.query(Student).filter(Student.email == email.strip()).first()
    if not student:
        raise NotFound(f"Student with email '{email}' not found")
    if student.is_pending:
        raise InvalidState("Student must confirm their email before joining a group")
    return student


def _member_snapshot(member: GroupMember) -> dict[str, Any]:
    """Plain copy of a membership, safe to return after the row is deleted."""
    return {
        "student_id": member.student_id,
        "email": member.email,
        "first_name": member.first_name,
        "last_name": member.last_name,
        "role": member.role.value,
        "joined_at": member.joined_at,
    }


def _ensure_room(db: Session, group: Group) -> None:
    project = db.query(Project).filter(Project.project_id == group.project_id).first()
    if not project:
        raise NotFound("Project not found")
    if count_members(db, group.group_id) >= project.max_group_size:
        raise InvalidState(
            f"Group has reached the maximum size of {project.max_group_size} members for this project"
        )


def _drop_student_selection(db: Session, student_id: int, project_id: int) -> None:
    """Best-effort cascade: a failure is logged and never blocks the removal."""
    try:
        selection_service.delete_student_selection_for(db, student_id, project_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning(
            "Failed to delete deliverable selection for student %s in project %s: %s",
            student_id, project_id, exc,
        )


def _insert_member(db: Session, group: Group, student: Student, role: StudentRole) -> GroupMember:
    member = GroupMember(
        group_id=group.group_id,
        student_id=student.student_id,
        project_id=group.project_id,
        role=role,
    )
    db.add(member)
    commit_or_conflict(db, "Student is already in a group for this project")
    db.refresh(member)
    return member


def _remove(db: Session, group: Group, member: GroupMember) -> dict[str, Any]:
    snapshot = _member_snapshot(member)
    db.delete(member)
    db.commit()
    logger.info("Removed student %s from group %s", snapshot["student_id"], group.group_id)
    _drop_student_selection(db, snapshot["student_id"], group.project_id)
    return {"removed": True, "message": "Member removed successfully from the group", "member": snapshot}


def _find_member(members: list[GroupMember], student_id: int) -> Optional[GroupMember]:
    return next((m for m in members if m.student_id == student_id), None)


# ---------------------------------------------------------------------------
# Student self-service
# ---------------------------------------------------------------------------
def create(db: Session, principal: Principal, name: str, security_code: str) -> Group:
    """Create a group from a security code. The creator becomes its GroupLeader."""
    require_student(principal)
    name = (name or "").strip()
    if not name:
        raise InvalidInput("Group name is mandatory")

    project_id = security_code_service.validate(db, security_code)

    if is_student_in_project(db, principal.id, project_id):
        raise Conflict("Student already has a group for this project")
    if name_exists(db, project_id, name):
        raise Conflict("A group with this name already exists in this project")

    group = Group(project_id=project_id, name=name)
    db.add(group)
    try:
        db.flush()
        db.add(GroupMember(
            group_id=group.group_id,
            student_id=principal.id,
            project_id=project_id,
            role=StudentRole.GroupLeader,
        ))
        db.commit()
    except IntegrityError as exc:
        # rolls back the group row together with the leader membership
        db.rollback()
        logger.warning("Group creation by student %s rolled back: %s", principal.id, exc.orig)
        raise Conflict("Student already has a group for this project or the name is taken")

    db.refresh(group)
    logger.info("Created group '%s' (%s) in project %s by student %s", name, group.group_id, project_id, principal.id)
    return group


def check_name(db: Session, project_id: int, name: str) -> bool:
    return name_exists(db, project_id, name)


def list_for_student(db: Session, principal: Principal) -> list[dict[str, Any]]:
    """Groups the calling student belongs to, with their project and role."""
    require_student(principal)
    memberships = (
        db.query(GroupMember)
        .filter(GroupMember.student_id == principal.id)
        .order_by(GroupMember.project_id)
        .all()
    )
    return [
        {"group": m.group, "project": m.group.project, "role": m.role.value}
        for m in memberships
    ]


def add_member(db: Session, principal: Principal, group_id: int, student_email: str) -> GroupMember:
    """Leader adds a student (by email) as a plain Member."""
    require_student(principal)
    if not is_group_leader(db, principal.id, group_id):
        logger.warning("Student %s is not the GroupLeader of group %s", principal.id, group_id)
        raise Forbidden("Only the group leader can add members")

    student = _get_student_by_email(db, student_email)
    group = _get_group(db, group_id)

    if is_student_in_project(db, student.student_id, group.project_id):
        raise Conflict("Student is already in a group for this project")
    _ensure_room(db, group)

    member = _insert_member(db, group, student, StudentRole.Member)
    logger.info("Student %s added %s to group %s", principal.id, student.student_id, group_id)
    return member


def remove_member(db: Session, principal: Principal, group_id: int, student_id: int) -> dict[str, Any]:
    """Leader removes a Member. The leader itself is never removed this way."""
    require_student(principal)
    if not is_group_leader(db, principal.id, group_id):
        logger.warning("Student %s is not the GroupLeader of group %s", principal.id, group_id)
        raise Forbidden("Only the group leader can remove members")

    group = _get_group(db, group_id)
    member = _find_member(get_group_members(db, group_id), student_id)
    if member is None:
        raise NotFound("Member not found in this group")
    if member.role == StudentRole.GroupLeader:
        return {"removed": False, "message": "Cannot remove the group leader", "member": _member_snapshot(member)}

    return _remove(db, group, member)


def leave(db: Session, principal: Principal, group_id: int) -> dict[str, Any]:
    """A Member leaves the group. A GroupLeader has to hand over leadership first."""
    require_student(principal)
    group = _get_group(db, group_id)
    member = _find_member(get_group_members(db, group_id), principal.id)
    if member is None:
        raise NotFound("You are not a member of this group")
    if member.role == StudentRole.GroupLeader:
        return {
            "removed": False,
            "message": "The group leader cannot leave the group; leadership must be transferred first",
            "member": _member_snapshot(member),
        }
    return _remove(db, group, member)


def delete_group(db: Session, principal: Principal, group_id: int) -> None:
    """Leader deletes the group with its members, selection and details."""
    require_student(principal)
    if not is_group_leader(db, principal.id, group_id):
        raise Forbidden("Only the group leader can delete the group")

    group = _get_group(db, group_id)
    project_id = group.project_id
    student_ids = [member.student_id for member in get_group_members(db, group_id)]

    db.delete(group)
    db.commit()
    logger.info("Group %s deleted by student %s", group_id, principal.id)
    for student_id in student_ids:
        _drop_student_selection(db, student_id, project_id)


# ---------------------------------------------------------------------------
# Administrative overrides
# ---------------------------------------------------------------------------
def list_project_groups(
    db: Session, principal: Principal, coordinators: CoordinatorQueries, project_id: int
) -> list[Group]:
    ensure_project_scope(principal, coordinators, project_id)
    return db.query(Group).filter(Group.project_id == project_id).order_by(Group.group_id).all()


def admin_add_member(
    db: Session,
    principal: Principal,
    coordinators: CoordinatorQueries,
    group_id: int,
    student_email: str,
    role: StudentRole = StudentRole.Member,
) -> GroupMember:
    """Add a student with an explicit role, honoring the project's group size."""
    require_admin(principal)
    group = _get_group(db, group_id)
    ensure_project_scope(principal, coordinators, group.project_id)

    student = _get_student_by_email(db, student_email)
    if is_student_in_project(db, student.student_id, group.project_id):
        raise Conflict("Student is already in a group for this project")
    _ensure_room(db, group)
    if role == StudentRole.GroupLeader and get_leader(db, group_id) is not None:
        raise Conflict("Group already has a leader")

    member = _insert_member(db, group, student, role)
    logger.info("Admin %s added student %s to group %s as %s", principal.id, student.student_id, group_id, role.value)
    return member


def admin_remove_member(
    db: Session, principal: Principal, coordinators: CoordinatorQueries, group_id: int, student_id: int
) -> dict[str, Any]:
    """Remove any member, the leader included."""
    require_admin(principal)
    group = _get_group(db, group_id)
    ensure_project_scope(principal, coordinators, group.project_id)

    member = _find_member(get_group_members(db, group_id), student_id)
    if member is None:
        return {"removed": False, "message": "Member not found in this group", "member": None}
    return _remove(db, group, member)


def transfer_leadership(
    db: Session,
    principal: Principal,
    coordinators: CoordinatorQueries,
    group_id: int,
    new_leader_student_id: int,
    remove_old_leader: bool = False,
) -> dict[str, Any]:
    """Hand the GroupLeader role to another member.

    The old leader is demoted to Member, or removed from the group when
    ``remove_old_leader`` is set. Both writes commit together.
    """
    require_admin(principal)
    group = _get_group(db, group_id)
    ensure_project_scope(principal, coordinators, group.project_id)

    members = get_group_members(db, group_id)
    current = next((m for m in members if m.role == StudentRole.GroupLeader), None)
    if current is None:
        raise Conflict("Group has no leader")
    if current.student_id == new_leader_student_id:
        raise Conflict("Student is already the group leader")
    target = _find_member(members, new_leader_student_id)
    if target is None:
        raise NotFound("New leader not found in group")

    old_info = {
        "student_id": current.student_id,
        "name": current.student.full_name if current.student else "",
        "status": "removed_from_group" if remove_old_leader else "demoted_to_member",
    }
    new_info = {
        "student_id": target.student_id,
        "name": target.student.full_name if target.student else "",
        "status": "promoted_to_leader",
    }

    try:
        if remove_old_leader:
            db.delete(current)
        else:
            current.role = StudentRole.Member
        # the old leader must be gone before the new one is written
        db.flush()
        target.role = StudentRole.GroupLeader
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Leadership transfer in group %s rolled back: %s", group_id, exc.orig)
        raise Conflict("Group leadership changed concurrently, please retry")

    if remove_old_leader:
        _drop_student_selection(db, old_info["student_id"], group.project_id)

    logger.info(
        "Leadership of group %s moved from %s to %s (old leader %s)",
        group_id, old_info["student_id"], new_info["student_id"], old_info["status"],
    )
    return {"message": "Group leader updated successfully", "old_leader": old_info, "new_leader": new_info}
