from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.security import Claims, issue_token
from ..crud.users import authenticate, create_user
from ..crud.work_sessions import user_daily_project_durations
from ..db.session import get_db
from ..deps.auth import require_user
from ..schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse, UserOut, UserRef
from ..schemas.reporting import ProjectTotals, StackedChart, UserWorkSessions
from ..services.aggregation import project_totals
from ..services.reporting import project_bars, stacked_chart

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("/register", response_model=RegisterResponse, status_code=201, summary="Create an account")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = create_user(db, payload.username, payload.email, payload.password)
    token = issue_token(user.id, user.email)
    return RegisterResponse(token=token, user=UserOut.model_validate(user))


@router.post("/login", response_model=LoginResponse, summary="Exchange email and password for a token")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, payload.email, payload.password)
    token = issue_token(user.id, user.email)
    return LoginResponse(token=token, user=UserRef(id=user.id, email=user.email))


# The ``user_id`` path segment is kept for URL compatibility with the SPA;
# the data always belongs to the token's user.


@router.get("/{user_id}/workSessions", response_model=UserWorkSessions)
def api_user_work_sessions(user_id: str, claims: Claims = Depends(require_user), db: Session = Depends(get_db)):
    rows = user_daily_project_durations(db, claims.id)
    return {"status": "success", "work_sessions": rows}


@router.get("/{user_id}/workSessions/stacked", response_model=StackedChart)
def api_user_stacked_chart(user_id: str, claims: Claims = Depends(require_user), db: Session = Depends(get_db)):
    rows = user_daily_project_durations(db, claims.id)
    return {"status": "success", **stacked_chart(rows)}


@router.get("/{user_id}/projectTotals", response_model=ProjectTotals)
def api_user_project_totals(user_id: str, claims: Claims = Depends(require_user), db: Session = Depends(get_db)):
    rows = user_daily_project_durations(db, claims.id)
    return {"status": "success", **project_bars(project_totals(rows))}
