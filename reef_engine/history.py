"""Bounded log of water tests and per-parameter series."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Sequence

import pandas as pd

from .constants import HISTORY_LIMIT, TEST_OVERDUE_DAYS
from .parameters import ParameterKind
from .utils import to_float

__all__ = [
    "TestEntry",
    "make_entry",
    "parse_date",
    "add_entries",
    "latest_entry",
    "parameter_series",
    "parameter_frame",
    "days_since_last_test",
    "is_test_overdue",
    "entry_to_dict",
    "entry_from_dict",
]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class TestEntry:
    """Readings captured together with the tank settings active at the time."""

    __test__ = False  # not a pytest test class

    date: datetime
    params: Dict[ParameterKind, float] = field(default_factory=dict)
    tank_gallons: float | None = None
    coral_type: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


def parse_date(value: Any, default: datetime | None = None) -> datetime:
    """Return ``value`` as an aware datetime or ``default`` (now) if unparsable.

    Naive datetimes are assumed to be UTC.
    """

    fallback = default or _now()
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip() if value is not None else ""
        if not text:
            return fallback
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            try:
                stamp = pd.to_datetime(text)
            except (ValueError, TypeError, OverflowError):
                return fallback
            if pd.isna(stamp):
                return fallback
            parsed = stamp.to_pydatetime()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _clean_params(params: Any) -> Dict[ParameterKind, float]:
    cleaned: Dict[ParameterKind, float] = {}
    if not isinstance(params, Mapping):
        return cleaned
    for key, raw in params.items():
        kind = ParameterKind.parse(key)
        value = to_float(raw)
        if kind is not None and value is not None:
            cleaned[kind] = value
    return cleaned


def make_entry(
    params: Mapping[Any, Any],
    tank_gallons: Any = None,
    coral_type: str | None = None,
    date: Any = None,
) -> TestEntry:
    """Return a :class:`TestEntry` keeping only readings that were supplied.

    Blank and non-numeric values are dropped instead of stored as zero.
    """

    return TestEntry(
        date=parse_date(date),
        params=_clean_params(params),
        tank_gallons=to_float(tank_gallons),
        coral_type=coral_type or None,
    )


def add_entries(
    history: Sequence[TestEntry],
    entries: Iterable[TestEntry],
    limit: int = HISTORY_LIMIT,
) -> list[TestEntry]:
    """Return a new history with ``entries`` merged in, newest first.

    Only the ``limit`` most recent entries by date are kept.
    """

    merged = [*entries, *history]
    merged.sort(key=lambda e: e.date, reverse=True)
    return merged[:limit]


def latest_entry(history: Sequence[TestEntry]) -> TestEntry | None:
    return max(history, key=lambda e: e.date, default=None)


def parameter_series(
    history: Sequence[TestEntry], kind: ParameterKind
) -> list[tuple[datetime, float]]:
    """Return ``(date, value)`` pairs for ``kind`` ordered oldest first."""
    points = [(e.date, e.params[kind]) for e in history if kind in e.params]
    points.sort(key=lambda p: p[0])
    return points


def parameter_frame(history: Sequence[TestEntry]) -> pd.DataFrame:
    """Return readings as a DataFrame indexed by test date, oldest first.

    Columns are parameter names; parameters never measured are omitted and
    tests that skipped a parameter hold ``NaN``.
    """

    if not history:
        return pd.DataFrame()
    rows = [
        {"date": e.date, **{k.value: v for k, v in e.params.items()}} for e in history
    ]
    df = pd.DataFrame(rows).set_index("date").sort_index()
    columns = [k.value for k in ParameterKind if k.value in df.columns]
    return df[columns]


def days_since_last_test(
    history: Sequence[TestEntry], now: datetime | None = None
) -> int | None:
    """Return whole days since the newest test or ``None`` without history."""
    last = latest_entry(history)
    if last is None:
        return None
    return ((now or _now()) - last.date).days


def is_test_overdue(history: Sequence[TestEntry], now: datetime | None = None) -> bool:
    days = days_since_last_test(history, now)
    return days is not None and days > TEST_OVERDUE_DAYS


def entry_to_dict(entry: TestEntry) -> Dict[str, Any]:
    """Return a JSON serializable dictionary for ``entry``."""
    return {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "params": {k.value: v for k, v in entry.params.items()},
        "tankGallons": entry.tank_gallons,
        "coralType": entry.coral_type,
    }


def entry_from_dict(data: Mapping[str, Any]) -> TestEntry:
    """Return a :class:`TestEntry` from :func:`entry_to_dict` output."""
    entry = make_entry(
        data.get("params") or {},
        data.get("tankGallons"),
        data.get("coralType"),
        data.get("date"),
    )
    if data.get("id"):
        entry.id = str(data["id"])
    return entry
