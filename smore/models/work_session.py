"""SQLAlchemy model for a single timed stretch of work on a project."""

from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import relationship

from ..db.session import Base


class WorkSession(Base):
    __tablename__ = "work_sessions"
    __allow_unmapped__ = True

    id = Column(Integer, primary_key=True, index=True)
    start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    # whole minutes; clients send at least 1 but storage does not enforce it
    duration = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    # calendar day the session was submitted on, not derived from start_time
    date = Column(Date, nullable=False, server_default=func.current_date())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="work_sessions")
    project = relationship("Project", back_populates="work_sessions")


__all__ = ["WorkSession"]
