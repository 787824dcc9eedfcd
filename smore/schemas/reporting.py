"""Schemas for the visualization endpoints."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel


class DailyProjectDuration(BaseModel):
    date: dt.date
    project_id: int
    project_name: str
    total_duration: int


class UserWorkSessions(BaseModel):
    status: str = "success"
    work_sessions: list[DailyProjectDuration]


class ProjectTotal(BaseModel):
    project_id: int
    project_name: str
    total_duration: int


class ProjectTotals(BaseModel):
    status: str = "success"
    totals: list[ProjectTotal]
    max_total: int


class StackSegment(BaseModel):
    date: dt.date
    y0: int
    y1: int
    duration: int


class StackSeries(BaseModel):
    key: str
    values: list[StackSegment]


class StackedChart(BaseModel):
    status: str = "success"
    dates: list[dt.date]
    projects: list[str]
    series: list[StackSeries]
    max_total: int
