from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..core.security import Claims
from ..crud.projects import (
    create_project,
    delete_project,
    get_project,
    list_projects,
    update_project,
)
from ..db.session import get_db
from ..deps.auth import require_user
from ..schemas.project import ProjectCreate, ProjectCreated, ProjectOut, ProjectSummary, ProjectUpdate

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.get("", response_model=list[ProjectSummary])
def api_list_projects(claims: Claims = Depends(require_user), db: Session = Depends(get_db)):
    return list_projects(db, claims.id)


@router.post("", response_model=ProjectCreated, status_code=201)
def api_create_project(payload: ProjectCreate, claims: Claims = Depends(require_user), db: Session = Depends(get_db)):
    try:
        project = create_project(db, claims.id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ProjectCreated(data=ProjectOut.model_validate(project))


@router.get("/{project_id}", response_model=ProjectOut)
def api_get_project(project_id: int, claims: Claims = Depends(require_user), db: Session = Depends(get_db)):
    return get_project(db, project_id, claims.id)


@router.put("/{project_id}", response_model=ProjectOut)
def api_update_project(
    project_id: int,
    payload: ProjectUpdate,
    claims: Claims = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        return update_project(db, project_id, claims.id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.delete("/{project_id}")
def api_delete_project(project_id: int, claims: Claims = Depends(require_user), db: Session = Depends(get_db)):
    delete_project(db, project_id, claims.id)
    return {"message": "Project deleted successfully"}
