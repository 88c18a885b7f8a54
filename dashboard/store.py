# dashboard/store.py - dashboard state and the reducers that replace it
# The full record frame is set once per load; filter changes swap the FilterSet.
# Nothing here mutates a state in place; every reducer returns a new one.

from __future__ import annotations

from dataclasses import dataclass, field, replace

import pandas as pd

from dashboard.aggregate import FilterSet, apply_filters
from dashboard.records import RECORD_COLUMNS


def empty_records() -> pd.DataFrame:
    return pd.DataFrame(columns=list(RECORD_COLUMNS))


@dataclass(frozen=True, eq=False)
class DashboardState:
    records: pd.DataFrame = field(default_factory=empty_records)
    filters: FilterSet = field(default_factory=FilterSet)


def with_records(state: DashboardState, records: pd.DataFrame) -> DashboardState:
    return replace(state, records=records)


def with_filters(state: DashboardState, filters: FilterSet) -> DashboardState:
    return replace(state, filters=filters)


def select_city(state: DashboardState, city: str) -> DashboardState:
    return with_filters(state, FilterSet(city=city or "", county=state.filters.county))


def select_county(state: DashboardState, county: str) -> DashboardState:
    return with_filters(state, FilterSet(city=state.filters.city, county=county or ""))


def visible_records(state: DashboardState) -> pd.DataFrame:
    """Filtered view, always recomputed from the full collection."""
    return apply_filters(state.records, state.filters)
