"""Stopwatch for recording a work session, as a pure state machine.

``transition(state, event)`` never mutates and never performs I/O: it returns
the next state together with the effects the caller should carry out (today
only ``SaveSession``, which asks the caller to POST the finished record).

    idle --start--> running --pause--> paused --resume--> running
    running|paused --stop--> stopped --save--> idle
    any --reset--> idle

The clock keeps running while paused; pausing only adds to ``paused_seconds``
which is subtracted from the wall-clock span.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .timecalc import format_elapsed, session_minutes, to_iso


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class InvalidTransition(ValueError):
    """The event is not allowed in the timer's current state."""

    def __init__(self, status: TimerStatus, event: "Event") -> None:
        self.status = status
        self.event = event
        super().__init__(f"cannot {type(event).__name__.lower()} a timer that is {status.value}")


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class Start:
    at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class Pause:
    at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class Resume:
    at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class Stop:
    at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class Tick:
    at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class Save:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class SetNotes:
    text: str


Event = Union[Start, Pause, Resume, Stop, Tick, Save, Reset, SetNotes]


@dataclass(frozen=True)
class SessionRecord:
    start_time: datetime
    end_time: datetime
    duration: int
    notes: str = ""

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for ``POST /api/v1/projects/{id}/workSessions``."""
        return {
            "start_time": to_iso(self.start_time),
            "end_time": to_iso(self.end_time),
            "duration": self.duration,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class SaveSession:
    record: SessionRecord


Effect = SaveSession


@dataclass(frozen=True)
class TimerState:
    status: TimerStatus = TimerStatus.IDLE
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    paused_seconds: float = 0.0
    elapsed_seconds: float = 0.0
    notes: str = ""

    @property
    def display(self) -> str:
        return format_elapsed(self.elapsed_seconds)


def _elapsed(state: TimerState, now: datetime) -> float:
    if state.started_at is None:
        return 0.0
    paused = state.paused_seconds
    if state.paused_at is not None:
        paused += (now - state.paused_at).total_seconds()
    return max((now - state.started_at).total_seconds() - paused, 0.0)


def transition(state: TimerState, event: Event) -> Tuple[TimerState, Tuple[Effect, ...]]:
    status = state.status

    if isinstance(event, Reset):
        return TimerState(), ()

    if isinstance(event, SetNotes):
        return replace(state, notes=event.text), ()

    if isinstance(event, Tick):
        if status is TimerStatus.RUNNING:
            return replace(state, elapsed_seconds=_elapsed(state, event.at)), ()
        return state, ()

    if isinstance(event, Start) and status is TimerStatus.IDLE:
        return (
            TimerState(status=TimerStatus.RUNNING, started_at=event.at, notes=state.notes),
            (),
        )

    if isinstance(event, Pause) and status is TimerStatus.RUNNING:
        return (
            replace(
                state,
                status=TimerStatus.PAUSED,
                paused_at=event.at,
                elapsed_seconds=_elapsed(state, event.at),
            ),
            (),
        )

    if isinstance(event, Resume) and status is TimerStatus.PAUSED:
        paused_for = (event.at - state.paused_at).total_seconds() if state.paused_at else 0.0
        return (
            replace(
                state,
                status=TimerStatus.RUNNING,
                paused_at=None,
                paused_seconds=state.paused_seconds + max(paused_for, 0.0),
            ),
            (),
        )

    if isinstance(event, Stop) and status in (TimerStatus.RUNNING, TimerStatus.PAUSED):
        elapsed = _elapsed(state, event.at)
        paused_seconds = state.paused_seconds
        if state.paused_at is not None:
            paused_seconds += max((event.at - state.paused_at).total_seconds(), 0.0)
        return (
            replace(
                state,
                status=TimerStatus.STOPPED,
                ended_at=event.at,
                paused_at=None,
                paused_seconds=paused_seconds,
                elapsed_seconds=elapsed,
            ),
            (),
        )

    if isinstance(event, Save) and status is TimerStatus.STOPPED:
        record = SessionRecord(
            start_time=state.started_at,
            end_time=state.ended_at,
            duration=session_minutes(state.elapsed_seconds),
            notes=state.notes,
        )
        return TimerState(), (SaveSession(record),)

    raise InvalidTransition(status, event)
