"""Tests for the terminal stopwatch client, with the HTTP save faked out."""

import sys
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
CLIENT_DIR = ROOT / "DesktopPythonInteractive"
for path in (ROOT, CLIENT_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

import session_timer
from smore.services.timer import Save, SetNotes, Start, TimerStatus


def _script(*lines):
    remaining = list(lines)

    def read(prompt):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return read


def test_parse_command():
    assert isinstance(session_timer.parse_command("start"), Start)
    assert isinstance(session_timer.parse_command("  SAVE "), Save)
    assert session_timer.parse_command("notes fixed the parser") == SetNotes("fixed the parser")
    assert session_timer.parse_command("quit") is None
    with pytest.raises(ValueError, match=r"^unknown command: launch$"):
        session_timer.parse_command("launch")
    with pytest.raises(ValueError, match=r"^unknown command: '   '$"):
        session_timer.parse_command("   ")


def test_run_loop_saves_a_finished_session():
    saved = []
    output = []

    def save(payload):
        saved.append(payload)
        return {"status": "success", "data": {"id": 7, **payload}}

    state = session_timer.run_loop(
        save,
        read=_script("notes reading", "start", "stop", "save", "quit"),
        write=output.append,
    )

    assert state.status is TimerStatus.IDLE
    assert len(saved) == 1
    assert saved[0]["duration"] == 1
    assert saved[0]["notes"] == "reading"
    assert saved[0]["start_time"].endswith("Z")
    assert any('"saved"' in line for line in output)


def test_run_loop_reports_invalid_commands_and_keeps_going():
    output = []

    state = session_timer.run_loop(
        lambda payload: {},
        read=_script("pause", "dance", "start"),
        write=output.append,
    )

    assert state.status is TimerStatus.RUNNING
    assert output[0].startswith("ERROR: cannot pause")
    assert output[1] == "ERROR: unknown command: dance"


def test_failed_save_keeps_the_stopped_timer():
    attempts = []
    output = []

    def flaky_save(payload):
        attempts.append(payload)
        if len(attempts) == 1:
            raise requests.ConnectionError("offline")
        return {"data": payload}

    state = session_timer.run_loop(
        flaky_save,
        read=_script("start", "stop", "save", "save"),
        write=output.append,
    )

    assert len(attempts) == 2
    assert attempts[0] == attempts[1]
    assert any(line.startswith("SAVE_FAILED") for line in output)
    assert state.status is TimerStatus.IDLE


def test_resolve_token_prefers_cli_then_env(monkeypatch):
    monkeypatch.setenv("SMORE_TOKEN", "from-env")
    args = session_timer.parse_args(["3", "--token", "from-cli"])
    assert session_timer.resolve_token(args, requests.Session()) == "from-cli"

    args = session_timer.parse_args(["3"])
    assert session_timer.resolve_token(args, requests.Session()) == "from-env"

    monkeypatch.delenv("SMORE_TOKEN")
    with pytest.raises(ValueError):
        session_timer.resolve_token(args, requests.Session())
