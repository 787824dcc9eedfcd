"""SQLAlchemy model for projects that group a user's work sessions."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from ..db.session import Base

DEFAULT_STATUS = "active"


class Project(Base):
    """Named bucket of tracked time, visible only to the user that created it."""

    __tablename__ = "projects"
    __allow_unmapped__ = True

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(50), nullable=True, default=DEFAULT_STATUS, server_default=DEFAULT_STATUS)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="projects")
    work_sessions = relationship(
        "WorkSession",
        back_populates="project",
        cascade="all",
        passive_deletes=True,
    )


__all__ = ["Project", "DEFAULT_STATUS"]
