"""Smoke check: can the configured EV CSV be loaded, and does it have the expected columns?"""

import sys

from fetch_ev_data import EV_DATA_SOURCE, DataLoadError, fetch_text, missing_columns, parse_csv
from dashboard.records import normalize_records


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    source = argv[0] if argv else EV_DATA_SOURCE
    print("🌐 Source:", source)

    try:
        text = fetch_text(source)
    except DataLoadError as e:
        print("❌ Error:", e)
        return 1

    rows = parse_csv(text)
    print("📦 Rows:", len(rows))
    if not rows:
        print("❌ No data rows found")
        return 1

    missing = missing_columns(rows)
    print("✅ All expected columns present" if not missing else f"⚠️ Missing columns: {', '.join(missing)}")

    df = normalize_records(rows)
    print("🟩 First record:", df.iloc[0].to_dict())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
