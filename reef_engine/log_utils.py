"""Collapse repeated data warnings from a bulk import into one line each."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, Tuple

__all__ = ["ImportWarnings"]

_Key = Tuple[str, str]


class ImportWarnings:
    """Problems found while importing one file, keyed by column and problem.

    A spreadsheet with one bad column repeats the same complaint on every
    row. Each ``(column, problem)`` pair is counted while the file is read
    and :meth:`flush` logs it once, with the number of lines affected and
    the first line it appeared on. A new instance is used per import so a
    second import of the same file reports its problems again.
    """

    def __init__(self, logger: logging.Logger, source: str = "csv") -> None:
        self._logger = logger
        self.source = source
        self._counts: Counter[_Key] = Counter()
        self._first_line: Dict[_Key, int] = {}

    def note(self, column: str, problem: str, line: int | None = None) -> None:
        key = (column, problem)
        self._counts[key] += 1
        if line is not None:
            self._first_line.setdefault(key, line)

    def __len__(self) -> int:
        return len(self._counts)

    def summary(self) -> list[Dict[str, Any]]:
        """Return the collected problems in the order first seen."""
        return [
            {
                "column": column,
                "problem": problem,
                "count": count,
                "first_line": self._first_line.get((column, problem)),
            }
            for (column, problem), count in self._counts.items()
        ]

    def flush(self) -> list[Dict[str, Any]]:
        """Log one warning per collected problem and reset the collector."""
        summary = self.summary()
        for item in summary:
            if item["first_line"] is None:
                self._logger.warning(
                    "%s: column %r %s", self.source, item["column"], item["problem"]
                )
            else:
                self._logger.warning(
                    "%s: column %r %s on %d line(s), first at line %d",
                    self.source,
                    item["column"],
                    item["problem"],
                    item["count"],
                    item["first_line"],
                )
        self._counts.clear()
        self._first_line.clear()
        return summary
