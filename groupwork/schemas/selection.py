"""Pydantic schemas for group and student deliverable selections."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from groupwork.schemas.implementation_detail import ImplementationDetailOut


class GroupSelectionCreate(BaseModel):
    group_deliverable_id: int


class GroupSelectionUpdate(BaseModel):
    link: str
    markdown_text: str
    # accepted for compatibility and ignored: the chosen deliverable is write-once
    group_deliverable_id: Optional[int] = None


class GroupSelectionOut(BaseModel):
    group_deliverable_selection_id: int
    group_id: int
    group_deliverable_id: int
    group_deliverable_name: str
    link: Optional[str] = None
    markdown_text: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GroupSelectionDetailOut(GroupSelectionOut):
    group_name: str
    implementation_details: list[ImplementationDetailOut] = []


class StudentSelectionCreate(BaseModel):
    student_deliverable_id: int
    project_id: int


class StudentSelectionOut(BaseModel):
    student_deliverable_selection_id: int
    student_id: int
    project_id: int
    student_deliverable_id: int
    student_deliverable_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
