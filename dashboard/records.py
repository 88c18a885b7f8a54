# dashboard/records.py - raw CSV rows -> typed EV registration records
# What it does:
# - normalize_record(): one raw row (all strings) -> one record with numeric fields
#   and Latitude/Longitude split out of "Vehicle Location"
# - normalize_records(): many raw rows -> the record frame every chart reads from

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping

import pandas as pd

MISSING = math.nan

NUMERIC_FIELDS = ("Model Year", "Electric Range", "Base MSRP")
LOCATION_FIELD = "Vehicle Location"
CAFV_FIELD = "Clean Alternative Fuel Vehicle (CAFV) Eligibility"
CATEGORICAL_FIELDS = (
    "Make",
    "City",
    "County",
    "Electric Vehicle Type",
    CAFV_FIELD,
    "Electric Utility",
)
REQUIRED_COLUMNS = (*NUMERIC_FIELDS, LOCATION_FIELD, *CATEGORICAL_FIELDS)
RECORD_COLUMNS = (*REQUIRED_COLUMNS, "Latitude", "Longitude")

# Leading-number prefixes: "2020", " 45000 ", "250 mi" all parse; "N/A" does not.
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)", re.ASCII)
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


def parse_int(value: Any) -> int | float:
    """Leading base-10 integer of a string, or NaN."""
    if not isinstance(value, str):
        return MISSING
    m = _INT_PREFIX.match(value)
    return int(m.group(1)) if m else MISSING


def parse_float(value: Any) -> float:
    """Leading decimal number of a string, or NaN."""
    if not isinstance(value, str):
        return MISSING
    m = _FLOAT_PREFIX.match(value)
    return float(m.group(1)) if m else MISSING


def split_location(location: Any) -> tuple[float, float]:
    """
    Split "POINT (a b)" into (Latitude, Longitude).
    Token 1 (minus its "(") becomes Latitude and token 2 (minus its ")")
    becomes Longitude, in that order. Anything unparseable is NaN.
    """
    if not isinstance(location, str):
        return MISSING, MISSING
    tokens = location.split(" ")
    lat = parse_float(tokens[1].replace("(", "", 1)) if len(tokens) > 1 else MISSING
    lon = parse_float(tokens[2].replace(")", "", 1)) if len(tokens) > 2 else MISSING
    return lat, lon


def normalize_record(raw: Mapping[str, Any]) -> dict[str, Any]:
    record = dict(raw)
    for field in NUMERIC_FIELDS:
        record[field] = parse_int(raw.get(field))
    record["Latitude"], record["Longitude"] = split_location(raw.get(LOCATION_FIELD))
    return record


def normalize_records(rows: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """
    Build the record frame in CSV row order.
    Every column in RECORD_COLUMNS is present; columns the CSV lacked are NaN.
    Extra CSV columns are kept after them.
    """
    df = pd.DataFrame([normalize_record(r) for r in rows])
    extra = [c for c in df.columns if c not in RECORD_COLUMNS]
    return df.reindex(columns=[*RECORD_COLUMNS, *extra])
