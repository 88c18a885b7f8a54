# fetch_ev_data.py - EV registration CSV loading with resilience and short-TTL caching
# What this file does:
# - Loads the data source location (URL or local path) from .env
# - Provides robust HTTP with retries for remote CSVs; local paths are read from disk
# - Parses CSV text into raw rows (header row, blank lines skipped, cells kept as text)
# - Normalizes rows into the record frame and caches it in-memory for a short TTL

from __future__ import annotations

import io
import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pandas as pd
import requests
from dotenv import load_dotenv
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from dashboard.records import REQUIRED_COLUMNS, normalize_records

log = logging.getLogger(__name__)

# ------------------ CONFIG ------------------
load_dotenv()  # read .env if present

EV_DATA_SOURCE = os.getenv("EV_DATA_SOURCE", "data/ev_data.csv")
REQUEST_TIMEOUT = float(os.getenv("EV_DATA_TIMEOUT", "30"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def resolve_log_level(name: str) -> int:
    """Numeric level for a name like "debug"; unknown names fall back to INFO."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


TTL_MINUTES = int(os.getenv("EV_DATA_TTL_MINUTES", "60"))  # cache the parsed frame for 1 hour


class DataLoadError(Exception):
    """The CSV source could not be fetched or read."""


# ------------------ ROBUST HTTP SESSION ------------------
def _make_session() -> requests.Session:
    """
    Create a requests.Session with retry/backoff and HTTP connection pooling.
    Transient 429/5xx responses are retried before anything reaches the app.
    """
    sess = requests.Session()

    retry = Retry(
        total=5,
        connect=5,
        read=5,
        backoff_factor=0.6,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=4)
    sess.mount("https://", adapter)
    sess.mount("http://", adapter)
    sess.headers.update({"User-Agent": "EV-Dashboard/1.0"})
    return sess

SESSION = _make_session()

# ------------------ FETCH + PARSE ------------------
def is_remote(source: str) -> bool:
    return str(source).lower().startswith(("http://", "https://"))

def fetch_text(source: str) -> str:
    """Return the raw CSV text from a URL or a local file."""
    if is_remote(source):
        try:
            r = SESSION.get(source, timeout=REQUEST_TIMEOUT)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise DataLoadError(f"could not fetch {source}: {exc}") from exc
        log.debug("fetched %s (%d bytes)", source, len(r.content))
        return r.text

    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"could not read {source}: {exc}") from exc

def parse_csv(text: str) -> list[dict]:
    """
    Header row -> keys; one dict per non-blank line.
    Cells stay as the literal text ("" stays "", "NA" stays "NA").
    Rows with more cells than the header are kept, cut to the header width.
    """
    if not text.strip():
        return []
    try:
        width = len(pd.read_csv(io.StringIO(text), nrows=0).columns)
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            engine="python",
            on_bad_lines=lambda bad: bad[:width],
        )
    except pd.errors.ParserError as exc:
        raise DataLoadError(f"could not parse CSV: {exc}") from exc
    return df.to_dict("records")

def missing_columns(rows: list[dict]) -> list[str]:
    if not rows:
        return list(REQUIRED_COLUMNS)
    present = rows[0].keys()
    return [c for c in REQUIRED_COLUMNS if c not in present]

def load_records(source: str = EV_DATA_SOURCE) -> pd.DataFrame:
    """
    Public loader: fetch -> parse -> normalize.
    Missing columns are a warning only; their values come through as NaN.
    """
    rows = parse_csv(fetch_text(source))
    missing = missing_columns(rows)
    if rows and missing:
        log.warning("%s is missing columns: %s", source, ", ".join(missing))
    df = normalize_records(rows)
    log.info("loaded %d EV records from %s", len(df), source)
    return df


_cache: dict[str, tuple[pd.DataFrame, datetime]] = {}

def load_records_ttl(source: str = EV_DATA_SOURCE, ttl_minutes: int = TTL_MINUTES) -> pd.DataFrame:
    """
    Same as load_records(), but keeps the frame in-memory for ttl_minutes.
    ttl_minutes=0 always refetches.
    """
    now = datetime.now(timezone.utc)

    hit = _cache.get(source)
    if hit:
        df, ts = hit
        if now - ts < timedelta(minutes=ttl_minutes):
            return df.copy()

    df = load_records(source)
    _cache[source] = (df.copy(), now)
    return df
