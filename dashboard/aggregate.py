# dashboard/aggregate.py - filtering and counting over the record frame
# What it does:
# - FilterSet / apply_filters(): city + county equality filters over the FULL frame
# - count_by(): value -> count, keys in first-seen order
# - top_n(): highest counts first, ties keep first-seen order
# - distinct_values() / select_choices(): option lists for the sidebar selects

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import pandas as pd

MISSING_KEY = "NaN"


@dataclass(frozen=True)
class FilterSet:
    """Equality constraints from the sidebar. Empty string = no constraint."""

    city: str = ""
    county: str = ""

    def constraints(self) -> dict[str, str]:
        return {"City": self.city, "County": self.county}


def apply_filters(records: pd.DataFrame, filters: FilterSet) -> pd.DataFrame:
    """
    Rows matching every non-empty constraint by exact string equality.
    Row order is kept. Pass the full collection, not an earlier result.
    """
    mask = pd.Series(True, index=records.index)
    for column, wanted in filters.constraints().items():
        if not wanted:
            continue
        if column not in records.columns:
            return records.iloc[0:0]
        mask &= records[column] == wanted
    return records.loc[mask]


def count_key(value: Any) -> str:
    """Stringify a field value for use as a count key (2020.0 -> '2020', NaN -> 'NaN')."""
    if value is None:
        return MISSING_KEY
    if isinstance(value, float):
        if math.isnan(value):
            return MISSING_KEY
        if value.is_integer():
            return str(int(value))
    return str(value)


def count_by(records: pd.DataFrame, field: str) -> dict[str, int]:
    if records.empty:
        return {}
    if field in records.columns:
        keys = records[field].map(count_key)
    else:
        keys = pd.Series(MISSING_KEY, index=records.index)
    # sort=False keeps groups in order of first appearance
    sizes = keys.groupby(keys, sort=False).size()
    return {str(k): int(v) for k, v in sizes.items()}


def top_n(counts: dict[str, int], n: int) -> list[tuple[str, int]]:
    if n <= 0:
        return []
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return ranked[:n]


def distinct_values(records: pd.DataFrame, field: str) -> list[str]:
    """Distinct non-empty strings of a column, first-seen order."""
    if field not in records.columns:
        return []
    values = records[field].drop_duplicates().tolist()
    return [v for v in values if isinstance(v, str) and v]


def select_choices(records: pd.DataFrame, field: str, all_label: str, current: str = "") -> tuple[dict[str, str], str]:
    """
    Choices for a sidebar select: "" -> all_label first, then every distinct value.
    Pass the full collection so options don't shrink while a filter is active.
    The current selection is kept when it still exists, otherwise reset to "".
    """
    choices = {"": all_label, **{v: v for v in distinct_values(records, field)}}
    return choices, current if current in choices else ""
