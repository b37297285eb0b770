"""Security code API routes: admin management and the student pre-check."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from groupwork.database import get_db
from groupwork.dependencies import get_coordinators
from groupwork.principal import Principal, get_admin, get_student
from groupwork.schemas.security_code import (
    SecurityCodeCheckOut,
    SecurityCodeCreate,
    SecurityCodeOut,
    SecurityCodeUpdate,
    SecurityCodeValidate,
)
from groupwork.services import coordinator_service, security_code_service
from groupwork.services.coordinator_service import CoordinatorAssignments

router = APIRouter()
validate_router = APIRouter()


@router.post("/", response_model=SecurityCodeOut, status_code=status.HTTP_201_CREATED)
def issue_code(
    payload: SecurityCodeCreate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
    coordinators: CoordinatorAssignments = Depends(get_coordinators),
):
    """Issue a new group creation code for a project."""
    return security_code_service.issue(db, admin, coordinators, payload.project_id, payload.expiration)


@router.get("/", response_model=list[SecurityCodeOut])
def list_codes(db: Session = Depends(get_db), admin: Principal = Depends(get_admin)):
    """List codes that have not expired yet."""
    project_ids = coordinator_service.projects_for(db, admin.id) if admin.is_coordinator else []
    return security_code_service.list_active(db, admin, project_ids)


@router.patch("/{security_code_id}", response_model=SecurityCodeOut)
def update_code(
    security_code_id: int,
    payload: SecurityCodeUpdate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
    coordinators: CoordinatorAssignments = Depends(get_coordinators),
):
    return security_code_service.update(
        db, admin, coordinators, security_code_id,
        regenerate=payload.regenerate, expiration=payload.expiration,
    )


@router.delete("/{security_code_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_code(
    security_code_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_admin),
    coordinators: CoordinatorAssignments = Depends(get_coordinators),
):
    security_code_service.delete(db, admin, coordinators, security_code_id)


@validate_router.post("/validate", response_model=SecurityCodeCheckOut)
def validate_code(
    payload: SecurityCodeValidate,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
):
    """Tell a student whether a code can be used to create a group."""
    return security_code_service.check(db, payload.code.strip())
