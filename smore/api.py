"""Application object and top-level wiring for the Smore time tracker.

Importing this module builds the FastAPI app: tables are created, the API
routers are mounted and the error handlers that turn domain exceptions into
JSON envelopes are registered. ``smore.main`` layers logging, metrics, the
health probe and the SPA fallback on top.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import (
    AppError,
    app_error_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware, SecurityHeadersMiddleware

# Importing the SQLAlchemy models registers them with the metadata. Without
# this step ``Base.metadata.create_all`` would not know about our tables.
from .models import user as _user  # noqa: F401
from .models import project as _project  # noqa: F401
from .models import work_session as _work_session  # noqa: F401

# ---------- App init ----------
app = FastAPI(title=settings.APP_NAME)

# ---------- DB init ----------
# ``create_all`` only adds missing tables, so it is safe on every start.
Base.metadata.create_all(bind=engine)

# ---------- Middleware ----------
# Added last runs first: request ids wrap everything so even CORS preflights
# get a correlation id in the log.
app.add_middleware(SecurityHeadersMiddleware)
if settings.ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
app.add_middleware(RequestIdMiddleware)

# ---------- Routers ----------
from .routers import api_users as api_users_router  # type: ignore

app.include_router(api_users_router.router)

from .routers import api_projects as api_projects_router  # type: ignore

app.include_router(api_projects_router.router)

from .routers import api_work_sessions as api_work_sessions_router  # type: ignore

app.include_router(api_work_sessions_router.router)

# ---------- Exception handling ----------
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["app"]
