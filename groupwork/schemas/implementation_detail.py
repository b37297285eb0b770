"""Pydantic schemas for component implementation details."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class ImplementationDetailCreate(BaseModel):
    group_deliverable_component_id: int
    markdown_description: str
    repository_link: str


class ImplementationDetailUpdate(BaseModel):
    markdown_description: str
    repository_link: str


class ImplementationDetailOut(BaseModel):
    id: int
    group_deliverable_selection_id: int
    group_deliverable_component_id: int
    component_name: str
    markdown_description: str
    repository_link: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
