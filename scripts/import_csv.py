#!/usr/bin/env python3
"""Import water tests from a CSV file into the local history."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
from scripts import ensure_repo_root_on_path

ROOT = ensure_repo_root_on_path()

from reef_engine.constants import DEFAULT_CORAL_TYPE, DEFAULT_TANK_GALLONS
from reef_engine.csv_import import CsvImportError, csv_template, import_csv
from reef_engine.diagnosis import diagnose_entry
from reef_engine.storage import TankStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import reef tests from CSV")
    parser.add_argument("csv", type=Path, nargs="?", help="CSV file to import")
    parser.add_argument("--store", type=Path, help="History file (default from env)")
    parser.add_argument("--gallons", type=float, help="Tank volume (default: saved profile)")
    parser.add_argument("--coral", help="Coral preset (default: saved profile)")
    parser.add_argument(
        "--template",
        action="store_true",
        help="Print a CSV template instead of importing",
    )
    args = parser.parse_args(argv)

    if args.template:
        print(csv_template())
        return 0
    if args.csv is None:
        parser.error("a CSV file is required unless --template is given")

    store = TankStore(args.store)
    state = store.load()
    if args.gallons is not None:
        state.tank_gallons = args.gallons
    if args.coral:
        state.coral_type = args.coral
    gallons = state.tank_gallons or DEFAULT_TANK_GALLONS
    coral = state.coral_type or DEFAULT_CORAL_TYPE
    try:
        state.history, imported = import_csv(
            state.history,
            args.csv.read_text(encoding="utf-8"),
            gallons,
            coral,
            source=args.csv.name,
        )
    except CsvImportError as err:
        print(str(err), file=sys.stderr)
        return 1
    store.save(state)

    report = [
        {
            "date": entry.date.isoformat(),
            "issues": [issue.as_dict() for issue in diagnose_entry(entry)],
        }
        for entry in imported
    ]
    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
