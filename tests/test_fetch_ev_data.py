import logging
import math
from pathlib import Path

import pytest
import requests

import fetch_ev_data
from fetch_ev_data import DataLoadError, fetch_text, load_records, load_records_ttl, missing_columns, parse_csv

SAMPLE = Path(__file__).resolve().parents[1] / "data" / "ev_data.csv"


class FakeResponse:
    def __init__(self, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text
        self.content = text.encode("utf-8")

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def test_parse_csv_keeps_text_and_skips_blank_lines():
    rows = parse_csv("City,Base MSRP\nSeattle,NA\n\nBellevue,\n")

    assert rows == [
        {"City": "Seattle", "Base MSRP": "NA"},
        {"City": "Bellevue", "Base MSRP": ""},
    ]


def test_parse_csv_empty_text():
    assert parse_csv("") == []
    assert parse_csv("City,County\n") == []


def test_missing_columns():
    rows = [{"City": "Seattle", "County": "King"}]

    missing = missing_columns(rows)

    assert "City" not in missing
    assert "Model Year" in missing
    assert "Vehicle Location" in missing


def test_fetch_text_remote(monkeypatch):
    monkeypatch.setattr(fetch_ev_data.SESSION, "get", lambda url, timeout: FakeResponse(200, "City\nSeattle\n"))

    assert fetch_text("https://example.com/ev_data.csv") == "City\nSeattle\n"


def test_fetch_text_remote_error_is_wrapped(monkeypatch):
    monkeypatch.setattr(fetch_ev_data.SESSION, "get", lambda url, timeout: FakeResponse(404))

    with pytest.raises(DataLoadError):
        fetch_text("https://example.com/ev_data.csv")


def test_fetch_text_missing_file(tmp_path: Path):
    with pytest.raises(DataLoadError):
        fetch_text(str(tmp_path / "nope.csv"))


def test_load_records_from_sample_file():
    df = load_records(str(SAMPLE))

    assert len(df) == 12
    first = df.iloc[0]
    assert first["Make"] == "TESLA"
    assert first["Model Year"] == 2020
    assert first["Latitude"] == -122.30839
    assert first["Longitude"] == 47.610365
    assert (df["City"] == "Seattle").sum() == 4
    # last row has an empty location
    assert math.isnan(df.iloc[-1]["Latitude"])


def test_load_records_warns_on_missing_columns(tmp_path: Path, caplog):
    path = tmp_path / "ev.csv"
    path.write_text("City,Make\nSeattle,TESLA\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="fetch_ev_data"):
        df = load_records(str(path))

    assert len(df) == 1
    assert df["Model Year"].isna().all()
    assert "missing columns" in caplog.text


def test_load_records_ttl_caches_until_expired(monkeypatch, tmp_path: Path):
    path = tmp_path / "ev.csv"
    path.write_text("City\nSeattle\n", encoding="utf-8")
    monkeypatch.setattr(fetch_ev_data, "_cache", {})
    calls = []
    real = fetch_ev_data.load_records

    def counting(source):
        calls.append(source)
        return real(source)

    monkeypatch.setattr(fetch_ev_data, "load_records", counting)

    first = load_records_ttl(str(path), ttl_minutes=60)
    second = load_records_ttl(str(path), ttl_minutes=60)
    assert len(calls) == 1
    assert second["City"].tolist() == first["City"].tolist()

    # cached frames are copies
    second.loc[0, "City"] = "Tacoma"
    assert load_records_ttl(str(path), ttl_minutes=60)["City"].tolist() == ["Seattle"]

    load_records_ttl(str(path), ttl_minutes=0)
    assert len(calls) == 2


def test_parse_csv_keeps_rows_with_extra_cells():
    rows = parse_csv("City,Make,Model Year\nSeattle,TESLA,2020\nBellevue,KIA,2019,extra\n")

    assert rows == [
        {"City": "Seattle", "Make": "TESLA", "Model Year": "2020"},
        {"City": "Bellevue", "Make": "KIA", "Model Year": "2019"},
    ]


def test_load_records_with_ragged_row(tmp_path: Path):
    path = tmp_path / "ev.csv"
    path.write_text("City,Make,Model Year\nSeattle,TESLA,2020\nBellevue,KIA,2019,extra\n", encoding="utf-8")

    df = load_records(str(path))

    assert df["City"].tolist() == ["Seattle", "Bellevue"]
    assert df["Model Year"].tolist() == [2020, 2019]


def test_non_utf8_file_raises_load_error(tmp_path: Path):
    path = tmp_path / "ev.csv"
    path.write_bytes(b"City,Make\nM\xfcnchen,TESLA\n")

    with pytest.raises(DataLoadError):
        load_records(str(path))


@pytest.mark.parametrize(
    "name, expected",
    [("INFO", logging.INFO), ("debug", logging.DEBUG), (" warning ", logging.WARNING), ("LOUD", logging.INFO), ("", logging.INFO)],
)
def test_resolve_log_level(name, expected):
    assert fetch_ev_data.resolve_log_level(name) == expected
