from __future__ import annotations
from datetime import datetime, timezone

MIN_SESSION_MINUTES = 1


def to_iso(dt: datetime) -> str:
    """UTC ISO string with millisecond precision and a trailing Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def session_minutes(elapsed_seconds: float) -> int:
    """
    Business rule for saved sessions:
      - whole minutes, truncated
      - never less than one minute, so a quick start/stop still counts
    """
    minutes = int(max(elapsed_seconds, 0) // 60)
    return max(minutes, MIN_SESSION_MINUTES)


def format_elapsed(seconds: float) -> str:
    """HH:MM:SS for the stopwatch display."""
    total = int(max(seconds, 0))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
