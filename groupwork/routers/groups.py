"""Student-facing group API routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from groupwork.database import get_db
from groupwork.principal import Principal, get_student
from groupwork.schemas.group import (
    GroupCreate,
    GroupMemberAdd,
    GroupMemberOut,
    GroupNameCheck,
    GroupNameCheckOut,
    GroupOut,
    MemberRemovalOut,
    StudentGroupOut,
)
from groupwork.services import group_service

router = APIRouter()


@router.post("/", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
def create_group(payload: GroupCreate, db: Session = Depends(get_db), student: Principal = Depends(get_student)):
    """Create a group with a security code. The creator becomes its GroupLeader."""
    return group_service.create(db, student, payload.name, payload.security_code.strip())


@router.get("/", response_model=list[StudentGroupOut])
def my_groups(db: Session = Depends(get_db), student: Principal = Depends(get_student)):
    """Groups the calling student belongs to."""
    return group_service.list_for_student(db, student)


@router.post("/check-name", response_model=GroupNameCheckOut)
def check_name(payload: GroupNameCheck, db: Session = Depends(get_db), student: Principal = Depends(get_student)):
    return {"exists": group_service.check_name(db, payload.project_id, payload.name)}


@router.get("/{group_id}/members", response_model=list[GroupMemberOut])
def list_members(group_id: int, db: Session = Depends(get_db), student: Principal = Depends(get_student)):
    group_service.get_group(db, group_id)
    return group_service.get_group_members(db, group_id)


@router.post("/{group_id}/members", response_model=GroupMemberOut, status_code=status.HTTP_201_CREATED)
def add_member(
    group_id: int,
    payload: GroupMemberAdd,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
):
    """Leader adds a student to the group by email."""
    return group_service.add_member(db, student, group_id, payload.student_email)


@router.delete("/{group_id}/members/{student_id}", response_model=MemberRemovalOut)
def remove_member(
    group_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    student: Principal = Depends(get_student),
):
    """Leader removes a member. Asking to remove the leader is answered with removed=false."""
    return group_service.remove_member(db, student, group_id, student_id)


@router.post("/{group_id}/leave", response_model=MemberRemovalOut)
def leave_group(group_id: int, db: Session = Depends(get_db), student: Principal = Depends(get_student)):
    return group_service.leave(db, student, group_id)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_group(group_id: int, db: Session = Depends(get_db), student: Principal = Depends(get_student)):
    group_service.delete_group(db, student, group_id)
