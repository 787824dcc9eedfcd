#!/usr/bin/env python3
"""
session_timer.py

Purpose:
  Run a work-session stopwatch in the terminal and save the finished session
  to a project on the Smore API.

API:
  Base:   http://localhost:8000/api/v1
  Login:  POST /users/login                       -> {"token": "...", "user": {...}}
  Save:   POST /projects/<id>/workSessions        -> body: {"start_time", "end_time", "duration", "notes"}
  Auth:   Authorization: Bearer <token>

Token precedence:
  1) --token <value> (CLI)
  2) env SMORE_TOKEN
  3) --email/--password login (password falls back to env SMORE_PASSWORD)

Commands at the prompt:
  start | pause | resume | stop | save | reset | notes <text> | status | quit

Examples:
  python session_timer.py 3 --email t@x.com
  SMORE_TOKEN=... python session_timer.py 3 --base-url https://smore.example.com/api/v1

Exit codes:
  0 = success
  1 = handled application error
  2 = network/HTTP error
"""

from __future__ import annotations
import os
import sys
import json
import getpass
import argparse
import requests
from pathlib import Path
from typing import Any, Callable, Dict, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from smore.services.timer import (  # noqa: E402
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
    transition,
)

DEFAULT_BASE_URL = "http://localhost:8000/api/v1"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Time a work session and save it to a Smore project.")
    p.add_argument("project_id", type=int, help="Project id the session belongs to.")
    p.add_argument("--base-url", default=os.getenv("SMORE_BASE_URL", DEFAULT_BASE_URL),
                   help=f"Base API URL (default: {DEFAULT_BASE_URL})")
    p.add_argument("--token", default=None,
                   help="Bearer token. Overrides env SMORE_TOKEN and --email login.")
    p.add_argument("--email", default=None, help="Log in with this email when no token is given.")
    p.add_argument("--password", default=None,
                   help="Password for --email (default: env SMORE_PASSWORD, else prompt).")
    p.add_argument("--timeout", type=float, default=15.0,
                   help="HTTP timeout in seconds (default: 15)")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="Verbose logging to stderr.")
    return p.parse_args(argv)


def vprint(enabled: bool, *args: Any) -> None:
    if enabled:
        print(*args, file=sys.stderr)


def build_headers(token: Optional[str], content_json: bool = False) -> Dict[str, str]:
    headers: Dict[str, str] = {"Accept": "application/json"}
    if content_json:
        headers["Content-Type"] = "application/json"
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _error_detail(r: requests.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return r.text
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or json.dumps(body))
    return json.dumps(body)


def api_login(session: requests.Session, base_url: str, email: str, password: str,
              timeout: float, verbose: bool) -> str:
    url = f"{base_url.rstrip('/')}/users/login"
    vprint(verbose, f"POST {url} email={email}")
    r = session.post(url, headers=build_headers(None, content_json=True),
                     json={"email": email, "password": password}, timeout=timeout)
    if r.status_code != 200:
        raise requests.HTTPError(f"Login failed ({r.status_code}): {_error_detail(r)}", response=r)
    return r.json()["token"]


def api_save_session(session: requests.Session, base_url: str, token: str, project_id: int,
                     payload: Dict[str, Any], timeout: float, verbose: bool) -> Dict[str, Any]:
    url = f"{base_url.rstrip('/')}/projects/{project_id}/workSessions"
    vprint(verbose, f"POST {url} json={payload}")
    r = session.post(url, headers=build_headers(token, content_json=True), json=payload, timeout=timeout)
    if r.status_code != 201:
        raise requests.HTTPError(f"Save failed ({r.status_code}): {_error_detail(r)}", response=r)
    return r.json()


def resolve_token(args: argparse.Namespace, session: requests.Session) -> str:
    if args.token:
        return args.token
    env_token = os.getenv("SMORE_TOKEN")
    if env_token:
        return env_token
    if not args.email:
        raise ValueError("No token supplied (use --token, env SMORE_TOKEN, or --email).")
    password = args.password or os.getenv("SMORE_PASSWORD") or getpass.getpass("Password: ")
    return api_login(session, args.base_url, args.email, password, args.timeout, args.verbose)


COMMANDS: Dict[str, Callable[[], Any]] = {
    "start": Start,
    "pause": Pause,
    "resume": Resume,
    "stop": Stop,
    "save": Save,
    "reset": Reset,
    "status": Tick,
}


def parse_command(line: str):
    """Map a prompt line to a timer event; None means quit."""
    verb, _, rest = line.strip().partition(" ")
    verb = verb.lower()
    if verb in ("q", "quit", "exit"):
        return None
    if verb == "notes":
        return SetNotes(rest.strip())
    if verb in COMMANDS:
        return COMMANDS[verb]()
    raise ValueError(f"unknown command: {verb or repr(line)}")


def run_loop(save: Callable[[Dict[str, Any]], Dict[str, Any]],
             read: Callable[[str], str] = input,
             write: Callable[[str], None] = print) -> TimerState:
    state = TimerState()
    while True:
        try:
            line = read(f"[{state.status.value} {state.display}] > ")
        except EOFError:
            return state
        try:
            event = parse_command(line)
        except ValueError as e:
            write(f"ERROR: {e}")
            continue
        if event is None:
            return state
        try:
            next_state, effects = transition(state, event)
        except InvalidTransition as e:
            write(f"ERROR: {e}")
            continue
        try:
            for effect in effects:
                if isinstance(effect, SaveSession):
                    created = save(effect.record.to_payload())
                    write(json.dumps({"status": "saved", "record": created.get("data", created)},
                                     indent=2, default=str))
        except requests.exceptions.RequestException as e:
            # Keep the stopped timer so the session can be saved again.
            write(f"SAVE_FAILED: {e}")
            continue
        state = next_state
        if isinstance(event, (Stop, Tick)):
            write(f"elapsed {state.display}")


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    session = requests.Session()
    try:
        token = resolve_token(args, session)

        def save(payload: Dict[str, Any]) -> Dict[str, Any]:
            return api_save_session(session, args.base_url, token, args.project_id,
                                    payload, args.timeout, args.verbose)

        run_loop(save)
        return 0

    except requests.exceptions.RequestException as e:
        print(f"NETWORK_ERROR: {e}", file=sys.stderr)
        return 2
    except (ValueError, KeyError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
