"""SQLAlchemy model for registered users."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from ..db.session import Base


class User(Base):
    """Account that owns projects and work sessions."""

    __tablename__ = "users"
    __allow_unmapped__ = True

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    # bcrypt hash; never serialized back to clients
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    projects = relationship(
        "Project",
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )
    work_sessions = relationship(
        "WorkSession",
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )


__all__ = ["User"]
