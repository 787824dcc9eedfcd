"""Pydantic schemas that describe project payloads for the API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: Optional[str] = Field(default=None, max_length=50)


class ProjectSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ProjectOut(ProjectSummary):
    description: Optional[str] = None
    status: Optional[str] = None
    user_id: int
    created_at: Optional[datetime] = None


class ProjectCreated(BaseModel):
    status: str = "success"
    data: ProjectOut
