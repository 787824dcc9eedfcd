"""Roll-ups over grouped work-session durations.

The visualization query returns one row per (date, project) pair that has at
least one session. Charts need the opposite: every pair present, with gaps
filled by zero, and each project's segment offset by the ones below it. The
helpers here do that reshaping without touching the database.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Tuple


def _to_minutes(value: Any) -> int:
    """Best-effort conversion of aggregate values to non-negative whole minutes.

    ``SUM`` comes back as ``int`` from SQLite but as ``Decimal`` or even a
    string from other drivers.
    """

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        try:
            minutes = int(float(value))
        except (TypeError, ValueError):
            return 0
    return max(minutes, 0)


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.split("T", 1)[0])
    raise ValueError(f"unsupported date value: {value!r}")


def _field(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _project_name(row: Any) -> str:
    name = _field(row, "project_name")
    if name is None:
        name = _field(row, "project")
    return "" if name is None else str(name)


def axes(rows: Iterable[Any]) -> Tuple[List[date], List[str]]:
    """Return (dates in chronological order, project names in first-seen order)."""

    dates: set[date] = set()
    projects: Dict[str, None] = {}
    for row in rows:
        dates.add(_to_date(_field(row, "date")))
        projects.setdefault(_project_name(row), None)
    return sorted(dates), list(projects)


def densify(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    """Fill the date x project grid, using 0 for every pair missing from ``rows``.

    Output is ordered by date, then by the project's first appearance, and has
    exactly ``len(dates) * len(projects)`` entries.
    """

    rows = list(rows)
    dates, projects = axes(rows)
    cells: Dict[Tuple[date, str], int] = {}
    for row in rows:
        key = (_to_date(_field(row, "date")), _project_name(row))
        cells[key] = cells.get(key, 0) + _to_minutes(_field(row, "total_duration"))

    return [
        {"date": day, "project": project, "duration": cells.get((day, project), 0)}
        for day in dates
        for project in projects
    ]


def stack(dense: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Compute stacked offsets from densified rows.

    Returns one series per project (first-seen order). Each value carries
    ``y0``/``y1`` where ``y0`` is the sum of the projects stacked beneath it on
    the same date and ``y1 - y0`` is the project's own duration.
    """

    series: Dict[str, List[Dict[str, Any]]] = {}
    offsets: Dict[date, int] = {}
    for cell in dense:
        day = _to_date(cell["date"])
        project = str(cell["project"])
        duration = _to_minutes(cell["duration"])
        y0 = offsets.get(day, 0)
        y1 = y0 + duration
        offsets[day] = y1
        series.setdefault(project, []).append(
            {"date": day, "y0": y0, "y1": y1, "duration": duration}
        )
    return [{"key": key, "values": values} for key, values in series.items()]


def daily_totals(dense: Iterable[Mapping[str, Any]]) -> Dict[date, int]:
    totals: Dict[date, int] = {}
    for cell in dense:
        day = _to_date(cell["date"])
        totals[day] = totals.get(day, 0) + _to_minutes(cell["duration"])
    return totals


def project_totals(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    """Sum durations per project, keeping the order projects first appear in.

    Projects are told apart by id; names are not unique per user. Rows that
    carry no id fall back to grouping by name.
    """

    totals: Dict[Any, Dict[str, Any]] = {}
    for row in rows:
        name = _project_name(row)
        project_id = _field(row, "project_id")
        key = ("id", project_id) if project_id is not None else ("name", name)
        entry = totals.setdefault(
            key,
            {"project_id": project_id, "project_name": name, "total_duration": 0},
        )
        entry["total_duration"] += _to_minutes(_field(row, "total_duration"))
    return list(totals.values())
