"""SQLAlchemy engine, session factory and the per-request session dependency."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from ..core.config import settings
from ..core.errors import Internal

logger = logging.getLogger("smore.db")

# For SQLite, ensure ``check_same_thread=False`` so the connection can be shared
# by FastAPI worker threads. Other database engines ignore this argument.
CONNECT_ARGS = {"check_same_thread": False} if settings.DB_URL.startswith("sqlite") else {}

# The engine owns the connection pool. One per process; sessions borrow from it.
engine = create_engine(settings.DB_URL, connect_args=CONNECT_ARGS)
# ``SessionLocal`` builds a fresh session for every request.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
# ``Base`` is the parent class for every SQLAlchemy model defined in smore/models.
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

    module = type(dbapi_connection).__module__
    if not module.startswith(("sqlite3", "pysqlite")):
        return
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def get_db():
    """FastAPI dependency that yields a session and guarantees cleanup."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_rollback(db: Session, failure_message: str | None = None) -> None:
    """Commit the unit of work; on a storage error roll back and surface ``Internal``."""

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("db.commit_failed")
        raise Internal(failure_message) from exc
