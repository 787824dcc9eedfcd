"""Tests for densifying, stacking and totalling grouped durations."""

import sys
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from smore.services.aggregation import axes, daily_totals, densify, project_totals, stack
from smore.services.reporting import project_bars, stacked_chart


D1 = date(2023, 5, 1)
D2 = date(2023, 5, 2)


@pytest.fixture()
def sparse_rows():
    return [
        {"date": D1, "project_id": 1, "project_name": "A", "total_duration": 90},
        {"date": D2, "project_id": 2, "project_name": "B", "total_duration": 30},
    ]


def test_densify_fills_missing_pairs_with_zero(sparse_rows):
    dense = densify(sparse_rows)

    assert dense == [
        {"date": D1, "project": "A", "duration": 90},
        {"date": D1, "project": "B", "duration": 0},
        {"date": D2, "project": "A", "duration": 0},
        {"date": D2, "project": "B", "duration": 30},
    ]


def test_densify_sums_repeated_pairs_and_sorts_dates():
    rows = [
        {"date": "2023-05-02", "project_name": "A", "total_duration": 10},
        {"date": datetime(2023, 5, 1, 8, 0), "project_name": "A", "total_duration": 5},
        {"date": "2023-05-02T00:00:00Z", "project_name": "A", "total_duration": 20},
    ]

    assert densify(rows) == [
        {"date": D1, "project": "A", "duration": 5},
        {"date": D2, "project": "A", "duration": 30},
    ]


def test_axes_keep_first_seen_project_order():
    rows = [
        {"date": D2, "project_name": "Zeta", "total_duration": 1},
        {"date": D1, "project_name": "Alpha", "total_duration": 1},
        {"date": D1, "project_name": "Zeta", "total_duration": 1},
    ]

    dates, projects = axes(rows)

    assert dates == [D1, D2]
    assert projects == ["Zeta", "Alpha"]


def test_durations_from_other_drivers_are_coerced():
    rows = [
        {"date": D1, "project_name": "A", "total_duration": Decimal("45")},
        {"date": D1, "project_name": "B", "total_duration": "15"},
        {"date": D1, "project_name": "C", "total_duration": None},
        {"date": D1, "project_name": "D", "total_duration": "n/a"},
    ]

    assert [cell["duration"] for cell in densify(rows)] == [45, 15, 0, 0]


def test_stack_offsets_accumulate_per_date(sparse_rows):
    series = stack(densify(sparse_rows))

    assert [s["key"] for s in series] == ["A", "B"]
    a_values, b_values = series[0]["values"], series[1]["values"]
    assert a_values[0] == {"date": D1, "y0": 0, "y1": 90, "duration": 90}
    assert b_values[0] == {"date": D1, "y0": 90, "y1": 90, "duration": 0}
    assert a_values[1] == {"date": D2, "y0": 0, "y1": 0, "duration": 0}
    assert b_values[1] == {"date": D2, "y0": 0, "y1": 30, "duration": 30}


def test_top_of_each_stack_equals_the_daily_total():
    rows = [
        {"date": D1, "project_name": "A", "total_duration": 90},
        {"date": D1, "project_name": "B", "total_duration": 60},
        {"date": D2, "project_name": "B", "total_duration": 15},
        {"date": D2, "project_name": "C", "total_duration": 20},
    ]
    dense = densify(rows)
    totals = daily_totals(dense)
    series = stack(dense)

    assert totals == {D1: 150, D2: 35}
    top = series[-1]["values"]
    assert {value["date"]: value["y1"] for value in top} == totals


def test_project_totals_sum_across_dates():
    rows = [
        {"date": D1, "project_id": 1, "project_name": "Design", "total_duration": 150},
        {"date": D2, "project_id": 2, "project_name": "Build", "total_duration": 90},
        {"date": D2, "project_id": 1, "project_name": "Design", "total_duration": 15},
    ]

    assert project_totals(rows) == [
        {"project_id": 1, "project_name": "Design", "total_duration": 165},
        {"project_id": 2, "project_name": "Build", "total_duration": 90},
    ]


def test_empty_input_produces_empty_outputs():
    assert densify([]) == []
    assert stack([]) == []
    assert project_totals([]) == []
    chart = stacked_chart([])
    assert chart == {"dates": [], "projects": [], "series": [], "max_total": 0}
    assert project_bars([]) == {"totals": [], "max_total": 0}


def test_stacked_chart_reports_axes_and_tallest_bar(sparse_rows):
    chart = stacked_chart(sparse_rows)

    assert chart["dates"] == [D1, D2]
    assert chart["projects"] == ["A", "B"]
    assert chart["max_total"] == 90
    assert len(chart["series"]) == 2


def test_project_bars_reports_largest_total():
    totals = [
        {"project_id": 1, "project_name": "Design", "total_duration": 165},
        {"project_id": 2, "project_name": "Build", "total_duration": 90},
    ]

    bars = project_bars(totals)

    assert bars["max_total"] == 165
    assert bars["totals"] == totals
    assert bars["totals"][0] is not totals[0]


def test_project_totals_keep_same_named_projects_apart():
    rows = [
        {"date": D1, "project_id": 1, "project_name": "Dup", "total_duration": 30},
        {"date": D1, "project_id": 2, "project_name": "Dup", "total_duration": 45},
        {"date": D2, "project_id": 1, "project_name": "Dup", "total_duration": 5},
    ]

    assert project_totals(rows) == [
        {"project_id": 1, "project_name": "Dup", "total_duration": 35},
        {"project_id": 2, "project_name": "Dup", "total_duration": 45},
    ]


def test_project_totals_without_ids_group_by_name():
    rows = [
        {"date": D1, "project": "A", "total_duration": 10},
        {"date": D2, "project": "A", "total_duration": 20},
    ]

    assert project_totals(rows) == [{"project_id": None, "project_name": "A", "total_duration": 30}]
