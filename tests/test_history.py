from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest

from reef_engine.history import (
    TestEntry,
    add_entries,
    days_since_last_test,
    entry_from_dict,
    entry_to_dict,
    is_test_overdue,
    latest_entry,
    make_entry,
    parameter_frame,
    parameter_series,
    parse_date,
)
from reef_engine.parameters import ParameterKind

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _entry(days_ago, **params):
    return make_entry(params, 75, "sps", NOW - timedelta(days=days_ago))


def test_make_entry_keeps_only_supplied_readings():
    entry = make_entry(
        {"ph": "8.1", "nitrate": "", "Calcium": 420, "bogus": 3, "phosphate": "n/a"},
        "75",
        "sps",
        "2025-01-15",
    )
    assert entry.params == {ParameterKind.PH: 8.1, ParameterKind.CALCIUM: 420.0}
    assert entry.tank_gallons == 75.0
    assert entry.coral_type == "sps"
    assert entry.date == datetime(2025, 1, 15, tzinfo=timezone.utc)
    assert len(entry.id) == 32


def test_make_entry_zero_reading_is_kept():
    entry = make_entry({"ammonia": "0"})
    assert entry.params == {ParameterKind.AMMONIA: 0.0}
    assert entry.tank_gallons is None
    assert entry.coral_type is None


def test_entry_ids_are_unique():
    assert make_entry({}).id != make_entry({}).id


def test_add_entries_orders_newest_first():
    old = _entry(5, ph=8.0)
    new = _entry(1, ph=8.2)
    history = add_entries([old], [new])
    assert history == [new, old]
    assert latest_entry(history) is new


def test_add_entries_does_not_mutate_input():
    history = [_entry(3)]
    add_entries(history, [_entry(1)])
    assert len(history) == 1


def test_history_is_bounded():
    history = []
    for day in range(101):
        history = add_entries(history, [_entry(200 - day, ph=8.0)])
    assert len(history) == 100
    dates = [e.date for e in history]
    assert dates == sorted(dates, reverse=True)
    # the oldest test was evicted
    assert min(dates) == NOW - timedelta(days=199)


def test_custom_limit():
    history = add_entries([], [_entry(d) for d in range(5)], limit=3)
    assert [e.date for e in history] == [NOW - timedelta(days=d) for d in range(3)]


def test_parameter_series_oldest_first():
    history = add_entries(
        [], [_entry(1, calcium=430), _entry(3, calcium=410), _entry(2, ph=8.1)]
    )
    series = parameter_series(history, ParameterKind.CALCIUM)
    assert series == [(NOW - timedelta(days=3), 410.0), (NOW - timedelta(days=1), 430.0)]
    assert parameter_series(history, ParameterKind.SALINITY) == []


def test_parameter_frame():
    history = add_entries([], [_entry(1, ph=8.2, calcium=430), _entry(2, ph=8.0)])
    df = parameter_frame(history)
    assert list(df.columns) == ["ph", "calcium"]
    assert df["ph"].tolist() == [8.0, 8.2]
    assert pd.isna(df["calcium"].iloc[0])
    assert parameter_frame([]).empty


def test_days_since_last_test():
    assert days_since_last_test([], NOW) is None
    history = [_entry(3), _entry(10)]
    assert days_since_last_test(history, NOW) == 3


@pytest.mark.parametrize("days_ago, overdue", [(7, False), (8, True), (0, False)])
def test_is_test_overdue(days_ago, overdue):
    assert is_test_overdue([_entry(days_ago)], NOW) is overdue


def test_no_history_is_not_overdue():
    assert is_test_overdue([], NOW) is False


def test_dict_round_trip():
    entry = _entry(2, ph=8.1, alkalinity=8.5)
    data = entry_to_dict(entry)
    assert data["params"] == {"ph": 8.1, "alkalinity": 8.5}
    assert data["tankGallons"] == 75.0
    assert data["coralType"] == "sps"
    restored = entry_from_dict(data)
    assert restored.id == entry.id
    assert restored.date == entry.date
    assert restored.params == entry.params


def test_parse_date_variants():
    assert parse_date("2025-01-15T08:30:00Z") == datetime(
        2025, 1, 15, 8, 30, tzinfo=timezone.utc
    )
    assert parse_date("01/15/2025") == datetime(2025, 1, 15, tzinfo=timezone.utc)
    assert parse_date("not a date", NOW) == NOW
    assert parse_date("", NOW) == NOW
    assert parse_date(None, NOW) == NOW
    naive = datetime(2025, 2, 1)
    assert parse_date(naive).tzinfo is timezone.utc


def test_test_entry_is_plain_dataclass():
    entry = TestEntry(date=NOW)
    assert entry.params == {}
