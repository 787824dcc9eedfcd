"""FastAPI dependencies shared across routers."""

from .auth import require_user

__all__ = ["require_user"]
