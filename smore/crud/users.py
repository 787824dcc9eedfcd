"""Account registration and credential checks."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import DuplicateEmail, EmailNotFound, InvalidPassword
from ..core.security import hash_password, verify_password
from ..db.session import commit_or_rollback
from ..models.user import User

logger = logging.getLogger("smore.users")


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == email)
    return db.execute(stmt).scalars().first()


def create_user(db: Session, username: str, email: str, password: str) -> User:
    # The lookup only gives a friendly error early; the unique index on
    # users.email is what actually rejects concurrent duplicates.
    if get_user_by_email(db, email) is not None:
        raise DuplicateEmail()
    user = User(username=username, email=email, password=hash_password(password))
    db.add(user)
    try:
        commit_or_rollback(db, "Server error: user not registered")
    except IntegrityError as exc:
        raise DuplicateEmail() from exc
    db.refresh(user)
    logger.info("user.registered", extra={"extra_data": {"user_id": user.id}})
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if user is None:
        raise EmailNotFound()
    if not verify_password(password, user.password):
        raise InvalidPassword()
    return user


def delete_user(db: Session, user: User) -> None:
    """Remove an account together with its projects and work sessions."""

    db.delete(user)
    commit_or_rollback(db, "Internal server error: could not delete user")
