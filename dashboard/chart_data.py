# dashboard/chart_data.py - aggregates -> chart payloads
# What it does:
# - series_from_counts() / series_from_top(): parallel labels + values
# - model_year_series(): labels and values sorted independently (see below)
# - chart_data(): the {"labels": [...], "datasets": [{"data": [...], ...}]} payload
# - CHARTS / build_chart(): the six dashboard charts and how each one is computed

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import cmp_to_key

import pandas as pd

from dashboard.aggregate import count_by, top_n
from dashboard.records import CAFV_FIELD


def series_from_counts(counts: dict[str, int]) -> tuple[list[str], list[int]]:
    return list(counts.keys()), list(counts.values())


def series_from_top(top: list[tuple[str, int]]) -> tuple[list[str], list[int]]:
    return [k for k, _ in top], [v for _, v in top]


def _as_number(key: str) -> float:
    try:
        return float(key)
    except ValueError:
        return math.nan


def _by_numeric_key(a: tuple[str, int], b: tuple[str, int]) -> int:
    diff = _as_number(a[0]) - _as_number(b[0])
    if math.isnan(diff):
        return 0
    return -1 if diff < 0 else (1 if diff > 0 else 0)


def model_year_series(counts: dict[str, int]) -> tuple[list[str], list[int]]:
    """
    Labels are the year keys in plain string order; values come from a separate
    numeric sort of the (year, count) pairs. The two are NOT re-aligned, so a
    non-numeric key such as "NaN" can leave labels[i] and values[i] describing
    different years.
    """
    labels = sorted(counts.keys())
    values = [v for _, v in sorted(counts.items(), key=cmp_to_key(_by_numeric_key))]
    return labels, values


def chart_data(labels: list[str], values: list[int], **style) -> dict:
    return {"labels": list(labels), "datasets": [{"data": list(values), **style}]}


@dataclass(frozen=True)
class ChartSpec:
    key: str
    title: str
    kind: str  # "pie" | "bar" | "line"
    field: str
    top: int | None = None
    style: dict = field(default_factory=dict)


CHARTS = (
    ChartSpec("ev_types", "EV Types", "pie", "Electric Vehicle Type",
              style={"backgroundColor": ["#36A2EB", "#FF6384", "#FFCE56"]}),
    ChartSpec("top_makes", "Top 5 EV Makes", "bar", "Make", top=5,
              style={"label": "Number of Vehicles", "backgroundColor": "#82ca9d"}),
    ChartSpec("model_years", "EVs by Model Year", "line", "Model Year",
              style={"label": "EVs by Model Year", "borderColor": "#9966FF"}),
    ChartSpec("top_cities", "Top Cities by EV Count", "bar", "City", top=10,
              style={"label": "Top Cities by EV Count", "backgroundColor": "#FF9F40"}),
    ChartSpec("cafv", "CAFV Eligibility Distribution", "pie", CAFV_FIELD,
              style={"label": "CAFV Eligibility", "backgroundColor": ["#00A896", "#F07167", "#FFD166"]}),
    ChartSpec("top_utilities", "Top Electric Utilities", "bar", "Electric Utility", top=10,
              style={"label": "Top Electric Utilities", "backgroundColor": "#8AC926"}),
)
CHARTS_BY_KEY = {c.key: c for c in CHARTS}


def build_chart(spec: ChartSpec, records: pd.DataFrame) -> dict:
    """Count the (already filtered) records for one chart and shape the payload."""
    counts = count_by(records, spec.field)
    if spec.field == "Model Year":
        labels, values = model_year_series(counts)
    elif spec.top is not None:
        labels, values = series_from_top(top_n(counts, spec.top))
    else:
        labels, values = series_from_counts(counts)
    return chart_data(labels, values, **spec.style)
