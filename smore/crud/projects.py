"""CRUD helpers for projects, always scoped to the owning user.

A project that exists but belongs to someone else is reported exactly like a
project that does not exist, so callers cannot probe other users' ids.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from ..core.errors import NotFound
from ..db.session import commit_or_rollback
from ..models.project import DEFAULT_STATUS, Project

logger = logging.getLogger("smore.projects")

UPDATABLE_FIELDS = ("name", "description", "status")


def list_projects(db: Session, user_id: int) -> list[Project]:
    stmt = select(Project).where(Project.user_id == user_id).order_by(Project.id)
    return list(db.execute(stmt).scalars().all())


def find_project(db: Session, project_id: int, user_id: int) -> Project | None:
    stmt = select(Project).where(Project.id == project_id, Project.user_id == user_id)
    return db.execute(stmt).scalars().first()


def get_project(db: Session, project_id: int, user_id: int) -> Project:
    project = find_project(db, project_id, user_id)
    if project is None:
        raise NotFound("Project not found")
    return project


def create_project(db: Session, user_id: int, payload: dict) -> Project:
    name = (payload.get("name") or "").strip()
    if not name:
        raise ValueError("name is required")
    project = Project(
        name=name,
        description=payload.get("description"),
        status=DEFAULT_STATUS,
        user_id=user_id,
    )
    db.add(project)
    commit_or_rollback(db, "Internal server error; project not added")
    db.refresh(project)
    logger.info("project.created", extra={"extra_data": {"project_id": project.id}})
    return project


def update_project(db: Session, project_id: int, user_id: int, payload: dict) -> Project:
    values = {field: payload[field] for field in UPDATABLE_FIELDS if field in payload}
    if "name" in values:
        name = (values["name"] or "").strip()
        if not name:
            raise ValueError("name is required")
        values["name"] = name
    if not values:
        return get_project(db, project_id, user_id)
    # One statement: the owner filter and the write cannot be split by a concurrent request.
    stmt = (
        update(Project)
        .where(Project.id == project_id, Project.user_id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount == 0:
        db.rollback()
        raise NotFound("Project not found")
    commit_or_rollback(db, "Project not updated")
    return get_project(db, project_id, user_id)


def delete_project(db: Session, project_id: int, user_id: int) -> None:
    # work_sessions rows go with it through ON DELETE CASCADE
    stmt = (
        delete(Project)
        .where(Project.id == project_id, Project.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount == 0:
        db.rollback()
        raise NotFound("Project not found!")
    commit_or_rollback(db, "Internal server error: could not delete project")
    logger.info("project.deleted", extra={"extra_data": {"project_id": project_id}})
