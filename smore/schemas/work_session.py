"""Pydantic schemas for work-session payloads."""

from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WorkSessionCreate(BaseModel):
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None
    duration: int = Field(..., ge=0)
    notes: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "start_time": "2024-05-01T09:00:00Z",
                "end_time": "2024-05-01T10:00:00Z",
                "duration": 60,
                "notes": "Drafted the report",
            }
        },
    }


class WorkSessionUpdate(WorkSessionCreate):
    duration: Optional[int] = Field(default=None, ge=0)
    date: Optional[dt.date] = None

    @field_validator("date", mode="before")
    @classmethod
    def date_part_only(cls, value: Any) -> Any:
        # Clients send whatever ISO timestamp they hold; only the calendar day is kept.
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class WorkSessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None
    duration: int
    notes: Optional[str] = None
    date: dt.date
    user_id: Optional[int] = None
    project_id: Optional[int] = None
    created_at: Optional[dt.datetime] = None


class WorkSessionListItem(BaseModel):
    id: int
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None
    duration: int
    notes: Optional[str] = None
    date: dt.date
    total_duration: int


class WorkSessionList(BaseModel):
    status: str = "success"
    work_sessions: list[WorkSessionListItem]
    total_duration: int


class WorkSessionCreated(BaseModel):
    status: str = "success"
    data: WorkSessionOut


class WorkSessionUpdated(BaseModel):
    message: str = "Work session updated successfully"
    work_session: WorkSessionOut
