#!/usr/bin/env python3
"""Diagnose a water test and print issues with remedies."""
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
from reef_engine.diagnosis import diagnose_detailed


def _parse_readings(items: list[str]) -> dict[str, str]:
    readings: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep:
            raise SystemExit(f"Reading must look like name=value: {item}")
        readings[key.strip()] = value.strip()
    return readings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Flag out-of-range reef parameters and suggest fixes"
    )
    parser.add_argument(
        "readings",
        nargs="*",
        help="Readings as name=value pairs, e.g. calcium=400 alkalinity=7.2",
    )
    parser.add_argument(
        "--file",
        type=Path,
        help="JSON file mapping parameter names to readings",
    )
    parser.add_argument("--gallons", type=float, default=DEFAULT_TANK_GALLONS)
    parser.add_argument("--coral", default=DEFAULT_CORAL_TYPE, help="Coral preset")
    args = parser.parse_args(argv)

    # pairs given on the command line win over the file
    readings = _parse_readings(args.readings)
    if args.file:
        try:
            from_file = json.loads(args.file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as err:
            parser.error(f"cannot read {args.file}: {err}")
        if not isinstance(from_file, dict):
            parser.error(f"{args.file} must contain a JSON object of readings")
        for key, value in from_file.items():
            readings.setdefault(key, value)
    result = diagnose_detailed(readings, args.gallons, args.coral)
    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":  # pragma: no cover
    main()
