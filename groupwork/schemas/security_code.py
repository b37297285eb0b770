"""Pydantic schemas for security codes."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from groupwork.schemas.group import ProjectSummary


class SecurityCodeCreate(BaseModel):
    project_id: int
    expiration: datetime


class SecurityCodeUpdate(BaseModel):
    regenerate: bool = False
    expiration: Optional[datetime] = None


class SecurityCodeOut(BaseModel):
    security_code_id: int
    project_id: int
    code: str
    project_name: Optional[str] = None
    expiration: datetime
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SecurityCodeValidate(BaseModel):
    code: str


class SecurityCodeCheckOut(BaseModel):
    is_valid: bool
    message: str
    project: Optional[ProjectSummary] = None
