"""CRUD and reporting queries for work sessions.

Every query joins through ``projects`` and filters on the caller's user id.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from ..core.errors import NotFound
from ..db.session import commit_or_rollback
from ..models.project import Project
from ..models.work_session import WorkSession
from .projects import get_project

logger = logging.getLogger("smore.work_sessions")

UPDATABLE_FIELDS = ("start_time", "end_time", "duration", "notes", "date")


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def list_project_work_sessions(db: Session, project_id: int, user_id: int) -> tuple[list[dict[str, Any]], int]:
    """Sessions for a project, newest day first, each tagged with the project-wide total.

    An empty project raises ``NotFound``: "nothing tracked yet" is a distinct
    answer from "tracked zero minutes".
    """

    total = func.sum(WorkSession.duration).over().label("total_duration")
    stmt = (
        select(
            WorkSession.id,
            WorkSession.start_time,
            WorkSession.end_time,
            WorkSession.duration,
            WorkSession.notes,
            WorkSession.date,
            total,
        )
        .join(Project, Project.id == WorkSession.project_id)
        .where(WorkSession.project_id == project_id, Project.user_id == user_id)
        .order_by(WorkSession.date.desc(), WorkSession.id.desc())
    )
    rows = [dict(row) for row in db.execute(stmt).mappings().all()]
    if not rows:
        raise NotFound("No work sessions found")
    for row in rows:
        row["total_duration"] = int(row["total_duration"] or 0)
    return rows, rows[0]["total_duration"]


def get_work_session(db: Session, project_id: int, work_session_id: int, user_id: int) -> WorkSession:
    stmt = (
        select(WorkSession)
        .join(Project, Project.id == WorkSession.project_id)
        .where(
            WorkSession.id == work_session_id,
            WorkSession.project_id == project_id,
            Project.user_id == user_id,
        )
    )
    work_session = db.execute(stmt).scalars().first()
    if work_session is None:
        raise NotFound("Work session not found")
    return work_session


def create_work_session(db: Session, user_id: int, project_id: int, payload: dict) -> WorkSession:
    project = get_project(db, project_id, user_id)
    work_session = WorkSession(
        start_time=payload.get("start_time"),
        end_time=payload.get("end_time"),
        duration=payload["duration"],
        notes=payload.get("notes"),
        user_id=user_id,
        project_id=project.id,
        # Stamped with the server's day at submission, not the session's start.
        date=_today(),
    )
    db.add(work_session)
    commit_or_rollback(db, "Internal server error")
    db.refresh(work_session)
    logger.info(
        "work_session.created",
        extra={"extra_data": {"work_session_id": work_session.id, "project_id": project.id}},
    )
    return work_session


def update_work_session(
    db: Session, project_id: int, work_session_id: int, user_id: int, payload: dict
) -> WorkSession:
    work_session = get_work_session(db, project_id, work_session_id, user_id)
    for field in UPDATABLE_FIELDS:
        if field not in payload:
            continue
        value = payload[field]
        if field in ("duration", "date") and value is None:
            continue
        setattr(work_session, field, value)
    commit_or_rollback(db, "Internal server error: could not update work session")
    db.refresh(work_session)
    return work_session


def delete_work_session(db: Session, project_id: int, work_session_id: int, user_id: int) -> None:
    work_session = get_work_session(db, project_id, work_session_id, user_id)
    db.delete(work_session)
    commit_or_rollback(db, "Internal server error: could not delete work session")


def user_daily_project_durations(db: Session, user_id: int) -> list[dict[str, Any]]:
    """Minutes per (date, project) for the user, sparse, ordered by date then project id."""

    stmt = (
        select(
            WorkSession.date,
            WorkSession.project_id,
            Project.name.label("project_name"),
            func.sum(WorkSession.duration).label("total_duration"),
        )
        .join(Project, Project.id == WorkSession.project_id)
        .where(WorkSession.user_id == user_id, Project.user_id == user_id)
        .group_by(WorkSession.date, WorkSession.project_id, Project.name)
        .order_by(WorkSession.date.asc(), WorkSession.project_id.asc())
    )
    rows = [dict(row) for row in db.execute(stmt).mappings().all()]
    if not rows:
        raise NotFound("No work sessions found for the user")
    for row in rows:
        row["total_duration"] = int(row["total_duration"] or 0)
    return rows
