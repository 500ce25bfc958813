#!/usr/bin/env python3
"""Print a safe multi-day supplement dosing schedule."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
from scripts import ensure_repo_root_on_path

ROOT = ensure_repo_root_on_path()

from reef_engine.constants import DEFAULT_TANK_GALLONS, SCHEDULE_PREVIEW_DAYS
from reef_engine.dosing import dosing_kinds, get_dosing_method, plan_dose
from reef_engine.units import DoseUnit, format_dose


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Calculate a dosing schedule")
    parser.add_argument("kind", choices=[k.value for k in dosing_kinds()])
    parser.add_argument("current", help="Current test value")
    parser.add_argument("target", help="Desired value")
    parser.add_argument("--method", type=int, default=0, help="Dosing method index")
    parser.add_argument("--gallons", type=float, default=DEFAULT_TANK_GALLONS)
    parser.add_argument(
        "--unit", choices=[u.value for u in DoseUnit], default=DoseUnit.TSP.value
    )
    parser.add_argument(
        "--days",
        type=int,
        default=SCHEDULE_PREVIEW_DAYS,
        help="Maximum schedule days to print",
    )
    args = parser.parse_args(argv)

    method = get_dosing_method(args.kind, args.method)
    plan = plan_dose(args.kind, args.current, args.target, method, args.gallons)
    if plan is None:
        print("Target must be a number greater than the current value.", file=sys.stderr)
        return 1

    result = plan.as_dict()
    result["total"] = format_dose(plan.total_dose, plan.method, args.unit)
    result["per_day"] = format_dose(plan.doses_per_day, plan.method, args.unit)
    result["schedule"] = [
        {
            "day": day.day,
            "dose": format_dose(day.dose, plan.method, args.unit),
            "projected": round(day.projected, 2),
            "retest": day.retest,
        }
        for day in plan.schedule(args.days)
    ]
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
