"""Coordinator assignment API routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from groupwork.database import get_db
from groupwork.principal import Principal, get_admin
from groupwork.schemas.coordinator import CoordinatorAssign, CoordinatorAssignmentOut, ProjectCoordinatorOut
from groupwork.services import coordinator_service

router = APIRouter()


@router.post(
    "/{project_id}/coordinator",
    response_model=CoordinatorAssignmentOut,
    status_code=status.HTTP_201_CREATED,
)
def assign_coordinator(
    project_id: int,
    payload: CoordinatorAssign,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
):
    return coordinator_service.assign(db, admin, project_id, payload.admin_id)


@router.get("/{project_id}/coordinator", response_model=ProjectCoordinatorOut)
def get_coordinator(project_id: int, db: Session = Depends(get_db), admin: Principal = Depends(get_admin)):
    """The project's coordinator, or null when none is assigned."""
    project, assignment = coordinator_service.get_for_project(db, project_id)
    return {"project_id": project.project_id, "project_name": project.name, "coordinator": assignment}


@router.delete("/{project_id}/coordinator/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
def unassign_coordinator(
    project_id: int,
    admin_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
):
    coordinator_service.unassign(db, admin, project_id, admin_id)
