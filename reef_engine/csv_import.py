"""Import water tests from spreadsheet CSV exports."""

from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from typing import Any, Sequence

import pandas as pd

from .constants import HISTORY_LIMIT
from .history import TestEntry, add_entries, make_entry, parse_date
from .log_utils import ImportWarnings
from .parameters import ParameterKind
from .utils import to_float

_LOGGER = logging.getLogger(__name__)

DATE_COLUMNS = ("date", "test_date", "timestamp")
CSV_TEMPLATE_HEADERS = ["date", *(k.value for k in ParameterKind)]
_TEMPLATE_EXAMPLE = ["2025-01-15", "5", "8.1", "8.5", "420", "0.03", "1.025", "78", "1350", "0", "0"]

__all__ = [
    "CsvImportError",
    "CSV_TEMPLATE_HEADERS",
    "csv_template",
    "parse_csv",
    "import_csv",
]


class CsvImportError(ValueError):
    """Raised when CSV text has no usable rows."""


def csv_template() -> str:
    """Return a CSV header with one example row."""
    return "\n".join([",".join(CSV_TEMPLATE_HEADERS), ",".join(_TEMPLATE_EXAMPLE)])


def _read_frame(text: str) -> pd.DataFrame:
    try:
        df = pd.read_csv(
            io.StringIO(text.strip()),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            index_col=False,
        )
    except pd.errors.EmptyDataError as exc:
        raise CsvImportError("CSV must have a header row and at least one data row.") from exc
    except pd.errors.ParserError as exc:
        raise CsvImportError(f"Malformed CSV: {exc}") from exc
    df.columns = [str(c).strip().lower() for c in df.columns]
    return df.fillna("")


def parse_csv(
    text: str,
    tank_gallons: Any = None,
    coral_type: str | None = None,
    now: datetime | None = None,
    source: str = "csv",
) -> list[TestEntry]:
    """Return test entries parsed from CSV ``text``.

    The header names a date column (``date``, ``test_date`` or ``timestamp``)
    and one column per parameter. Blank cells are treated as not tested and
    rows with a missing or unparsable date are stamped with ``now``. Every
    entry gets the supplied tank settings.

    Unknown columns, unreadable dates and non-numeric readings are logged
    once per column for this import, named after ``source``.
    """

    df = _read_frame(text)
    if df.empty:
        raise CsvImportError("CSV must have a header row and at least one data row.")

    stamp = now or datetime.now(timezone.utc)
    warnings = ImportWarnings(_LOGGER, source)
    for column in df.columns:
        if column not in DATE_COLUMNS and ParameterKind.parse(column) is None:
            warnings.note(column, "is not a known parameter and was ignored")

    date_column = next((c for c in DATE_COLUMNS if c in df.columns), None)
    param_columns = [c for c in df.columns if ParameterKind.parse(c) is not None]

    entries: list[TestEntry] = []
    # line 1 is the header
    for line, (_, row) in enumerate(df.iterrows(), start=2):
        raw_date = row[date_column] if date_column else ""
        date = parse_date(raw_date, stamp)
        if date is stamp and str(raw_date).strip():
            warnings.note(date_column, "has an unreadable date, used the import time", line)
        for column in param_columns:
            cell = str(row[column]).strip()
            if cell and to_float(cell) is None:
                warnings.note(column, "has a non-numeric reading", line)
        entries.append(
            make_entry(
                {c: row[c] for c in param_columns}, tank_gallons, coral_type, date
            )
        )
    warnings.flush()
    _LOGGER.debug("Parsed %d entries from %s", len(entries), source)
    return entries


def import_csv(
    history: Sequence[TestEntry],
    text: str,
    tank_gallons: Any = None,
    coral_type: str | None = None,
    now: datetime | None = None,
    limit: int = HISTORY_LIMIT,
    source: str = "csv",
) -> tuple[list[TestEntry], list[TestEntry]]:
    """Return ``(new_history, imported)`` after merging CSV rows into history."""
    imported = parse_csv(text, tank_gallons, coral_type, now, source)
    return add_entries(history, imported, limit), imported
