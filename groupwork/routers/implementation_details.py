"""Component implementation detail API routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from groupwork.database import get_db
from groupwork.dependencies import get_membership
from groupwork.principal import Principal, get_principal, get_student
from groupwork.schemas.implementation_detail import (
    ImplementationDetailCreate,
    ImplementationDetailOut,
    ImplementationDetailUpdate,
)
from groupwork.services import implementation_detail_service
from groupwork.services.group_service import GroupMembership

router = APIRouter()
selection_router = APIRouter()


@router.post(
    "/{group_id}/component-details",
    response_model=ImplementationDetailOut,
    status_code=status.HTTP_201_CREATED,
)
def create_detail(
    group_id: int,
    payload: ImplementationDetailCreate,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
    membership: GroupMembership = Depends(get_membership),
):
    return implementation_detail_service.create(
        db, student, membership, group_id,
        payload.group_deliverable_component_id, payload.markdown_description, payload.repository_link,
    )


@router.patch("/{group_id}/component-details/{component_id}", response_model=ImplementationDetailOut)
def update_detail(
    group_id: int,
    component_id: int,
    payload: ImplementationDetailUpdate,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
    membership: GroupMembership = Depends(get_membership),
):
    return implementation_detail_service.update(
        db, student, membership, group_id, component_id, payload.markdown_description, payload.repository_link,
    )


@router.delete("/{group_id}/component-details/{component_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_detail(
    group_id: int,
    component_id: int,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
    membership: GroupMembership = Depends(get_membership),
):
    implementation_detail_service.delete(db, student, membership, group_id, component_id)


@router.get("/{group_id}/component-details", response_model=list[ImplementationDetailOut])
def list_group_details(group_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_principal)):
    return implementation_detail_service.list_for_group(db, group_id)


@selection_router.get("/{selection_id}/component-details", response_model=list[ImplementationDetailOut])
def list_selection_details(
    selection_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_principal)
):
    return implementation_detail_service.list_for_selection(db, selection_id)
