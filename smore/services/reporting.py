from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .aggregation import axes, daily_totals, densify, stack


def stacked_chart(rows: Iterable[Any]) -> Dict[str, Any]:
    """Build the stacked-bar payload (one bar per date, one segment per project)."""

    rows = list(rows)
    dates, projects = axes(rows)
    dense = densify(rows)
    totals = daily_totals(dense)
    return {
        "dates": dates,
        "projects": projects,
        "series": stack(dense),
        "max_total": max(totals.values(), default=0),
    }


def project_bars(totals: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Payload for the "time spent per project" bar chart."""

    bars: List[Dict[str, Any]] = [dict(entry) for entry in totals]
    return {
        "totals": bars,
        "max_total": max((entry["total_duration"] for entry in bars), default=0),
    }
