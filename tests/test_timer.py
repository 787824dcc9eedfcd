import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from smore.services.timecalc import format_elapsed, session_minutes, to_iso
from smore.services.timer import (
    InvalidTransition,
    Pause,
    Reset,
    Resume,
    Save,
    SaveSession,
    SetNotes,
    Start,
    Stop,
    Tick,
    TimerState,
    TimerStatus,
    transition,
)

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def at(seconds):
    return T0 + timedelta(seconds=seconds)


def run(events, state=None):
    state = state or TimerState()
    effects = ()
    for event in events:
        state, effects = transition(state, event)
    return state, effects


def test_start_tick_stop_save_produces_one_record():
    state, effects = run(
        [
            Start(at=at(0)),
            Tick(at=at(30)),
            SetNotes("outline"),
            Stop(at=at(125)),
            Save(),
        ]
    )

    assert state == TimerState()
    assert len(effects) == 1
    assert isinstance(effects[0], SaveSession)
    record = effects[0].record
    assert record.start_time == at(0)
    assert record.end_time == at(125)
    assert record.duration == 2
    assert record.notes == "outline"


def test_tick_updates_display_only_while_running():
    running, _ = run([Start(at=at(0)), Tick(at=at(3725))])
    assert running.display == "01:02:05"

    paused, _ = transition(running, Pause(at=at(3725)))
    still_paused, _ = transition(paused, Tick(at=at(4000)))
    assert still_paused.elapsed_seconds == paused.elapsed_seconds

    idle, effects = transition(TimerState(), Tick(at=at(10)))
    assert idle == TimerState()
    assert effects == ()


def test_paused_time_is_not_counted():
    state, _ = run(
        [
            Start(at=at(0)),
            Pause(at=at(60)),
            Resume(at=at(600)),
            Stop(at=at(720)),
        ]
    )

    assert state.status is TimerStatus.STOPPED
    assert state.paused_seconds == 540
    assert state.elapsed_seconds == 180


def test_stop_while_paused_excludes_the_open_pause():
    state, _ = run([Start(at=at(0)), Pause(at=at(240)), Stop(at=at(900))])

    assert state.status is TimerStatus.STOPPED
    assert state.elapsed_seconds == 240
    assert state.paused_at is None


def test_short_sessions_round_up_to_one_minute():
    _, effects = run([Start(at=at(0)), Stop(at=at(5)), Save()])

    assert effects[0].record.duration == 1


@pytest.mark.parametrize(
    "events",
    [
        [Pause(at=at(0))],
        [Resume(at=at(0))],
        [Stop(at=at(0))],
        [Save()],
        [Start(at=at(0)), Start(at=at(1))],
        [Start(at=at(0)), Save()],
        [Start(at=at(0)), Pause(at=at(1)), Pause(at=at(2))],
        [Start(at=at(0)), Stop(at=at(1)), Resume(at=at(2))],
    ],
)
def test_invalid_transitions_raise(events):
    state, _ = run(events[:-1])

    with pytest.raises(InvalidTransition):
        transition(state, events[-1])


def test_reset_discards_everything():
    state, _ = run([SetNotes("draft"), Start(at=at(0)), Pause(at=at(10))])

    reset, effects = transition(state, Reset())

    assert reset == TimerState()
    assert effects == ()


def test_notes_survive_start():
    state, _ = run([SetNotes("before start"), Start(at=at(0))])

    assert state.notes == "before start"
    assert state.status is TimerStatus.RUNNING


def test_record_payload_is_iso_utc():
    _, effects = run([Start(at=at(0)), Stop(at=at(61)), Save()])

    assert effects[0].record.to_payload() == {
        "start_time": "2024-03-01T09:00:00.000Z",
        "end_time": "2024-03-01T09:01:01.000Z",
        "duration": 1,
        "notes": "",
    }


def test_timecalc_helpers():
    assert session_minutes(0) == 1
    assert session_minutes(59.9) == 1
    assert session_minutes(150) == 2
    assert format_elapsed(0) == "00:00:00"
    assert format_elapsed(-3) == "00:00:00"
    assert to_iso(datetime(2024, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=1)))) == "2024-03-01T09:00:00.000Z"
