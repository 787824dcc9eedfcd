from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {"username": "t", "email": "t@x.com", "password": "pw123456"}
        },
    }

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    model_config = {
        "json_schema_extra": {
            "example": {"email": "t@x.com", "password": "pw123456"}
        },
    }


class UserOut(BaseModel):
    """Public view of a user; the password hash is never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    created_at: datetime | None = None


class UserRef(BaseModel):
    id: int
    email: str


class RegisterResponse(BaseModel):
    message: str = "User registered successfully!"
    token: str
    user: UserOut


class LoginResponse(BaseModel):
    token: str
    user: UserRef
