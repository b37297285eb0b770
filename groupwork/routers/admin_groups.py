"""Administrative group API routes, scoped per project for Coordinators."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from groupwork.database import get_db
from groupwork.dependencies import get_coordinators
from groupwork.principal import Principal, get_admin
from groupwork.schemas.group import (
    AdminGroupMemberAdd,
    GroupMemberOut,
    GroupOut,
    LeaderTransfer,
    LeaderTransferOut,
    MemberRemovalOut,
)
from groupwork.services import group_service
from groupwork.services.coordinator_service import CoordinatorAssignments

router = APIRouter()


@router.get("/projects/{project_id}", response_model=list[GroupOut])
def list_project_groups(
    project_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
    coordinators: CoordinatorAssignments = Depends(get_coordinators),
):
    return group_service.list_project_groups(db, admin, coordinators, project_id)


@router.post("/{group_id}/members", response_model=GroupMemberOut, status_code=status.HTTP_201_CREATED)
def add_member(
    group_id: int,
    payload: AdminGroupMemberAdd,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
    coordinators: CoordinatorAssignments = Depends(get_coordinators),
):
    """Add a student with an explicit role, within the project's group size."""
    return group_service.admin_add_member(db, admin, coordinators, group_id, payload.student_email, payload.role)


@router.delete("/{group_id}/members/{student_id}", response_model=MemberRemovalOut)
def remove_member(
    group_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
    coordinators: CoordinatorAssignments = Depends(get_coordinators),
):
    return group_service.admin_remove_member(db, admin, coordinators, group_id, student_id)


@router.patch("/{group_id}/leader", response_model=LeaderTransferOut)
def transfer_leadership(
    group_id: int,
    payload: LeaderTransfer,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
    coordinators: CoordinatorAssignments = Depends(get_coordinators),
):
    """Move the GroupLeader role to another member of the group."""
    return group_service.transfer_leadership(
        db, admin, coordinators, group_id, payload.new_leader_student_id, payload.remove_old_leader,
    )
