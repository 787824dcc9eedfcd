from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.security import Claims
from ..crud.work_sessions import (
    create_work_session,
    delete_work_session,
    get_work_session,
    list_project_work_sessions,
    update_work_session,
)
from ..db.session import get_db
from ..deps.auth import require_user
from ..schemas.work_session import (
    WorkSessionCreate,
    WorkSessionCreated,
    WorkSessionList,
    WorkSessionOut,
    WorkSessionUpdate,
    WorkSessionUpdated,
)

router = APIRouter(prefix="/api/v1/projects/{project_id}/workSessions", tags=["work sessions"])


@router.get("", response_model=WorkSessionList)
def api_list_work_sessions(project_id: int, claims: Claims = Depends(require_user), db: Session = Depends(get_db)):
    sessions, total = list_project_work_sessions(db, project_id, claims.id)
    return {"status": "success", "work_sessions": sessions, "total_duration": total}


@router.get("/{work_session_id}", response_model=WorkSessionOut)
def api_get_work_session(
    project_id: int,
    work_session_id: int,
    claims: Claims = Depends(require_user),
    db: Session = Depends(get_db),
):
    return get_work_session(db, project_id, work_session_id, claims.id)


@router.post("", response_model=WorkSessionCreated, status_code=201)
def api_create_work_session(
    project_id: int,
    payload: WorkSessionCreate,
    claims: Claims = Depends(require_user),
    db: Session = Depends(get_db),
):
    work_session = create_work_session(db, claims.id, project_id, payload.model_dump())
    return WorkSessionCreated(data=WorkSessionOut.model_validate(work_session))


@router.put("/{work_session_id}", response_model=WorkSessionUpdated)
def api_update_work_session(
    project_id: int,
    work_session_id: int,
    payload: WorkSessionUpdate,
    claims: Claims = Depends(require_user),
    db: Session = Depends(get_db),
):
    work_session = update_work_session(
        db, project_id, work_session_id, claims.id, payload.model_dump(exclude_unset=True)
    )
    return WorkSessionUpdated(work_session=WorkSessionOut.model_validate(work_session))


@router.delete("/{work_session_id}")
def api_delete_work_session(
    project_id: int,
    work_session_id: int,
    claims: Claims = Depends(require_user),
    db: Session = Depends(get_db),
):
    delete_work_session(db, project_id, work_session_id, claims.id)
    return {"message": "Work session deleted"}
