"""Deliverable selection API routes for groups, students and admins."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from groupwork.database import get_db
from groupwork.dependencies import get_coordinators, get_membership
from groupwork.principal import Principal, get_admin, get_principal, get_student
from groupwork.schemas.selection import (
    GroupSelectionCreate,
    GroupSelectionDetailOut,
    GroupSelectionOut,
    GroupSelectionUpdate,
    StudentSelectionCreate,
    StudentSelectionOut,
)
from groupwork.services import selection_service
from groupwork.services.coordinator_service import CoordinatorAssignments
from groupwork.services.group_service import GroupMembership

group_router = APIRouter()
student_router = APIRouter()
admin_router = APIRouter()


# ---------------------------------------------------------------------------
# /api/groups/{group_id}/deliverable-selection
# ---------------------------------------------------------------------------
@group_router.post(
    "/{group_id}/deliverable-selection",
    response_model=GroupSelectionOut,
    status_code=status.HTTP_201_CREATED,
)
def create_group_selection(
    group_id: int,
    payload: GroupSelectionCreate,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
    membership: GroupMembership = Depends(get_membership),
):
    """Leader picks the group's deliverable. This can only happen once."""
    return selection_service.create_group_selection(
        db, student, membership, group_id, payload.group_deliverable_id
    )


@group_router.patch("/{group_id}/deliverable-selection", response_model=GroupSelectionOut)
def update_group_selection(
    group_id: int,
    payload: GroupSelectionUpdate,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
    membership: GroupMembership = Depends(get_membership),
):
    return selection_service.update_group_selection(
        db, student, membership, group_id, payload.link, payload.markdown_text
    )


@group_router.get("/{group_id}/deliverable-selection", response_model=GroupSelectionOut)
def get_group_selection(group_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_principal)):
    return selection_service.get_group_selection(db, group_id)


# ---------------------------------------------------------------------------
# /api/deliverable-selection
# ---------------------------------------------------------------------------
@student_router.post("/", response_model=StudentSelectionOut, status_code=status.HTTP_201_CREATED)
def create_student_selection(
    payload: StudentSelectionCreate,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
    membership: GroupMembership = Depends(get_membership),
):
    return selection_service.create_student_selection(
        db, student, membership, payload.student_deliverable_id, payload.project_id
    )


@student_router.patch("/", response_model=StudentSelectionOut)
def update_student_selection(
    payload: StudentSelectionCreate,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
    membership: GroupMembership = Depends(get_membership),
):
    return selection_service.update_student_selection(
        db, student, membership, payload.student_deliverable_id, payload.project_id
    )


@student_router.get("/projects/{project_id}", response_model=StudentSelectionOut)
def get_student_selection(project_id: int, db: Session = Depends(get_db), student: Principal = Depends(get_student)):
    return selection_service.get_student_selection(db, student, project_id)


@student_router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student_selection(
    project_id: int, db: Session = Depends(get_db), student: Principal = Depends(get_student)
):
    selection_service.delete_student_selection(db, student, project_id)


# ---------------------------------------------------------------------------
# /api/admin/projects/{project_id}/...
# ---------------------------------------------------------------------------
@admin_router.get("/{project_id}/group-deliverable-selections", response_model=list[GroupSelectionDetailOut])
def list_group_selections(
    project_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
    coordinators: CoordinatorAssignments = Depends(get_coordinators),
):
    """Every group selection of a project with its implementation details."""
    return selection_service.list_project_group_selections(db, admin, coordinators, project_id)


@admin_router.get("/{project_id}/student-deliverable-selections", response_model=list[StudentSelectionOut])
def list_student_selections(
    project_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
    coordinators: CoordinatorAssignments = Depends(get_coordinators),
):
    return selection_service.list_project_student_selections(db, admin, coordinators, project_id)
