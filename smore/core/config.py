"""Environment-driven configuration for the Smore service.

Every knob the service reads lives on ``AppSettings``. Values come from the
process environment first and then from ``.env`` / ``.env.local`` files in the
working directory, so a development checkout boots without extra setup.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Iterable

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Smore"
    BASE_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2])
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2] / "data")
    FRONTEND_BUILD_DIR: Path | None = None

    # The signing secret has no safe default in production; the fallback only
    # exists so tests and a fresh checkout can issue tokens.
    JWT_SECRET: str = "testsecrettestsecrettestsecret"
    JWT_TTL_HOURS: int = 12
    BCRYPT_ROUNDS: int = 10

    DB_URL: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "DB_URL"),
    )

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: Annotated[list[str], NoDecode] = Field(default_factory=list)
    LOG_LEVEL: str = "INFO"

    @property
    def frontend_build_dir(self) -> Path:
        if self.FRONTEND_BUILD_DIR is not None:
            return self.FRONTEND_BUILD_DIR
        return self.BASE_DIR / "smore-frontend" / "build"

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: Any) -> list[str]:
        if value in (None, "", []):
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Iterable):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("ALLOWED_ORIGINS must be a comma separated string or list")

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def check_bcrypt_rounds(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return value


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    if not settings.DB_URL:
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
        settings.DB_URL = f"sqlite:///{settings.DATA_DIR}/smore.db"
    return settings


settings = get_settings()
