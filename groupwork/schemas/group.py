"""Pydantic schemas for Groups and their members."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from groupwork.models.group import StudentRole


class GroupCreate(BaseModel):
    name: str
    security_code: str


class GroupNameCheck(BaseModel):
    project_id: int
    name: str


class GroupNameCheckOut(BaseModel):
    exists: bool


class GroupOut(BaseModel):
    group_id: int
    project_id: int
    name: str
    created_at: Optional[datetime] = None
    members: list[GroupMemberOut] = []

    model_config = {"from_attributes": True}


class GroupMemberAdd(BaseModel):
    student_email: str


class AdminGroupMemberAdd(BaseModel):
    student_email: str
    role: StudentRole = StudentRole.Member


class GroupMemberOut(BaseModel):
    student_id: int
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: StudentRole
    joined_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MemberRemovalOut(BaseModel):
    removed: bool
    message: str
    member: Optional[GroupMemberOut] = None


class ProjectSummary(BaseModel):
    project_id: int
    name: str
    year: int
    max_group_size: int
    deliverable_selection_deadline: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StudentGroupOut(BaseModel):
    group: GroupOut
    project: ProjectSummary
    role: StudentRole


class LeaderTransfer(BaseModel):
    new_leader_student_id: int
    remove_old_leader: bool = False


class LeaderChange(BaseModel):
    student_id: int
    name: str
    status: str


class LeaderTransferOut(BaseModel):
    message: str
    old_leader: LeaderChange
    new_leader: LeaderChange


# Rebuild forward references now that GroupMemberOut is defined
GroupOut.model_rebuild()
