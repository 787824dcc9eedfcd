from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ValidationError

from .config import settings

ALGORITHM = "HS256"


class InvalidToken(ValueError):
    """Raised when a bearer token cannot be trusted."""


class Claims(BaseModel):
    """Verified identity carried by a session token."""

    id: int
    email: str
    exp: datetime
    iat: datetime | None = None


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def hash_password(plain: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash; treat like a mismatch.
        return False


def issue_token(user_id: int, email: str, expires_delta: timedelta | None = None) -> str:
    now = _now()
    delta = expires_delta if expires_delta is not None else timedelta(hours=settings.JWT_TTL_HOURS)
    payload: dict[str, Any] = {
        "id": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + delta).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> Claims:
    try:
        decoded = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except ExpiredSignatureError as exc:
        raise InvalidToken("Token expired") from exc
    except JWTError as exc:
        raise InvalidToken("Invalid token") from exc
    try:
        return Claims.model_validate(decoded)
    except ValidationError as exc:
        raise InvalidToken("Invalid token payload") from exc
