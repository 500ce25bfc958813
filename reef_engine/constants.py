"""Central constants used across the reef engine."""

from __future__ import annotations

import os
from pathlib import Path

# Tank volume assumed when a form field is blank or not a number
DEFAULT_TANK_GALLONS = 50.0
DEFAULT_CORAL_TYPE = "mixed"

# Maximum number of test entries retained in the history
HISTORY_LIMIT = 100

# Days without a test before the dashboard flags the tank as overdue
TEST_OVERDUE_DAYS = 7

# Number of days shown in the dosing schedule preview
SCHEDULE_PREVIEW_DAYS = 7

STORAGE_ENV = "REEFPULSE_STORAGE_PATH"
DEFAULT_STORAGE_PATH = Path("~/.reefpulse/reef-tank-data.json")


def get_storage_path() -> Path:
    """Return the history file location honoring ``REEFPULSE_STORAGE_PATH``."""

    env = os.getenv(STORAGE_ENV)
    return Path(env).expanduser() if env else DEFAULT_STORAGE_PATH.expanduser()


__all__ = [
    "DEFAULT_TANK_GALLONS",
    "DEFAULT_CORAL_TYPE",
    "HISTORY_LIMIT",
    "TEST_OVERDUE_DAYS",
    "SCHEDULE_PREVIEW_DAYS",
    "STORAGE_ENV",
    "DEFAULT_STORAGE_PATH",
    "get_storage_path",
]
