"""Single entry point for the ReefPulse scripts.

Usage::

    python -m scripts.cli [--store PATH] [--gallons N] [--coral TYPE] <command> [args]

Tank options are given once before the command and forwarded to the
commands that accept them. Options left out are filled from the saved tank
profile, so ``diagnose`` and ``dose-plan`` judge readings against the same
tank that ``import-csv`` recorded.
"""

from __future__ import annotations

import argparse
import importlib
from pathlib import Path
import sys
from typing import Dict, Tuple

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
from scripts import ensure_repo_root_on_path

ROOT = ensure_repo_root_on_path()

from reef_engine.storage import TankStore

# command -> (module, tank options it accepts)
COMMANDS: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "diagnose": ("scripts.diagnose", ("gallons", "coral")),
    "dose-plan": ("scripts.dose_plan", ("gallons",)),
    "import-csv": ("scripts.import_csv", ("store", "gallons", "coral")),
}

# commands that load the store themselves
_READS_STORE = {"import-csv"}


def _tank_options(ns: argparse.Namespace) -> list[str]:
    """Return ``--option value`` pairs to pass on to ``ns.command``."""
    values = {"store": ns.store, "gallons": ns.gallons, "coral": ns.coral}
    if ns.command not in _READS_STORE:
        state = TankStore(ns.store).load()
        if values["gallons"] is None:
            values["gallons"] = state.tank_gallons
        if not values["coral"]:
            values["coral"] = state.coral_type

    _, accepted = COMMANDS[ns.command]
    forwarded: list[str] = []
    for name in accepted:
        if values[name] is not None:
            forwarded += [f"--{name}", str(values[name])]
    return forwarded


def main(argv: list[str] | None = None) -> int:
    """Run a script subcommand and return its exit status."""
    parser = argparse.ArgumentParser(description="ReefPulse utilities")
    parser.add_argument("--store", type=Path, help="Tank history file")
    parser.add_argument("--gallons", type=float, help="Tank volume in gallons")
    parser.add_argument("--coral", help="Coral preset")
    parser.add_argument("command", choices=sorted(COMMANDS))
    parser.add_argument("args", nargs=argparse.REMAINDER)
    ns = parser.parse_args(argv)

    module_name, _ = COMMANDS[ns.command]
    module = importlib.import_module(module_name)
    # options after the command override the forwarded ones
    return module.main(_tank_options(ns) + ns.args) or 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
