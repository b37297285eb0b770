"""Pydantic schemas for coordinator assignments."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CoordinatorAssign(BaseModel):
    admin_id: int


class CoordinatorOut(BaseModel):
    admin_id: int
    email: str
    first_name: str
    last_name: str

    model_config = {"from_attributes": True}


class CoordinatorAssignmentOut(BaseModel):
    coordinator_project_id: int
    project_id: int
    admin_id: int
    assigned_at: Optional[datetime] = None
    admin: Optional[CoordinatorOut] = None

    model_config = {"from_attributes": True}


class ProjectCoordinatorOut(BaseModel):
    project_id: int
    project_name: str
    coordinator: Optional[CoordinatorAssignmentOut] = None
