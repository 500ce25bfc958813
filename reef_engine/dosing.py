"""Multi-day supplement dosing plans that respect safe daily change rates."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .constants import DEFAULT_TANK_GALLONS
from .parameters import ParameterKind, get_ideal_range
from .utils import load_dataset, to_float

DATA_FILE = "dosing_methods.json"

__all__ = [
    "DosingMethod",
    "DosingPlan",
    "ScheduleDay",
    "dosing_kinds",
    "list_dosing_methods",
    "get_dosing_method",
    "plan_dose",
]


@dataclass(slots=True, frozen=True, kw_only=True)
class DosingMethod:
    """A supplement product or technique for raising one parameter.

    The reference dose (one standard amount, e.g. "1 tsp") raises the
    parameter by ``units_per_dose_of_std_amount`` in a tank of
    ``standard_amount_gallons``.
    """

    name: str = ""
    units_per_dose_of_std_amount: float
    standard_amount_gallons: float
    max_change_per_day: float
    grams_per_std_amount: float | None = None
    ml_per_dose: float | None = None
    is_drip_method: bool = False
    per_amount: str = ""
    note: str = ""

    def __post_init__(self) -> None:
        for attr in (
            "units_per_dose_of_std_amount",
            "standard_amount_gallons",
            "max_change_per_day",
        ):
            if getattr(self, attr) <= 0:
                raise ValueError(f"{self.name or 'dosing method'}: {attr} must be positive")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DosingMethod":
        grams = data.get("grams_per_std_amount")
        ml = data.get("ml_per_dose")
        return cls(
            name=str(data.get("name", "")),
            units_per_dose_of_std_amount=float(data["units_per_dose"]),
            standard_amount_gallons=float(data["standard_gallons"]),
            max_change_per_day=float(data["max_change_per_day"]),
            grams_per_std_amount=float(grams) if grams is not None else None,
            ml_per_dose=float(ml) if ml is not None else None,
            is_drip_method=bool(data.get("is_drip", False)),
            per_amount=str(data.get("per_amount", "")),
            note=str(data.get("note", "")),
        )

    def doses_for(self, change: float, tank_gallons: float) -> float:
        """Return standard amounts needed to move ``tank_gallons`` by ``change``."""
        return (change / self.units_per_dose_of_std_amount) * (
            tank_gallons / self.standard_amount_gallons
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class ScheduleDay:
    day: int
    dose: float
    projected: float
    retest: bool


@dataclass(slots=True, frozen=True)
class DosingPlan:
    """Result of :func:`plan_dose`. Doses are in the method's standard amount."""

    kind: ParameterKind
    current: float
    target: float
    deficit: float
    method: DosingMethod
    total_dose: float
    days_needed: int
    per_day_change: float
    doses_per_day: float
    unit: str

    def schedule(self, limit: int | None = None) -> list[ScheduleDay]:
        """Return the day-by-day dosing schedule.

        The projected value is clamped to the target so float error never
        shows a reading past it. ``limit`` truncates long schedules for
        preview displays.
        """

        days = self.days_needed if limit is None else min(self.days_needed, limit)
        return [
            ScheduleDay(
                day=d,
                dose=self.doses_per_day,
                projected=min(self.current + self.per_day_change * d, self.target),
                retest=d == self.days_needed,
            )
            for d in range(1, days + 1)
        ]

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


@lru_cache(maxsize=None)
def _methods() -> Mapping[ParameterKind, tuple[DosingMethod, ...]]:
    table: Dict[ParameterKind, tuple[DosingMethod, ...]] = {}
    for name, entries in load_dataset(DATA_FILE).items():
        kind = ParameterKind.parse(name)
        if kind is None or not isinstance(entries, list):
            continue
        table[kind] = tuple(DosingMethod.from_dict(e) for e in entries)
    return MappingProxyType(table)


def dosing_kinds() -> list[ParameterKind]:
    """Return parameters that have at least one dosing method."""
    return [kind for kind, methods in _methods().items() if methods]


def list_dosing_methods(kind: ParameterKind | str) -> list[DosingMethod]:
    """Return dosing methods for ``kind`` or an empty list."""
    parsed = ParameterKind.parse(kind)
    if parsed is None:
        return []
    return list(_methods().get(parsed, ()))


def get_dosing_method(kind: ParameterKind | str, index: int = 0) -> DosingMethod | None:
    """Return method ``index`` for ``kind`` falling back to the first method."""
    methods = list_dosing_methods(kind)
    if not methods:
        return None
    if 0 <= index < len(methods):
        return methods[index]
    return methods[0]


def plan_dose(
    kind: ParameterKind | str,
    current: Any,
    target: Any,
    method: DosingMethod | int | None = None,
    tank_gallons: Any = None,
) -> DosingPlan | None:
    """Return a dosing plan raising ``kind`` from ``current`` to ``target``.

    ``None`` is returned when either value is not a number or when
    ``target`` is not above ``current``; lowering a parameter is done with
    water changes, not supplements. ``method`` may be a
    :class:`DosingMethod` or an index into :func:`list_dosing_methods`.
    Doses scale linearly with deficit and tank volume, and the deficit is
    spread evenly over the fewest days that stay under the method's
    ``max_change_per_day``.
    """

    parsed = ParameterKind.parse(kind)
    cur = to_float(current)
    tar = to_float(target)
    if parsed is None or cur is None or tar is None or tar <= cur:
        return None

    if not isinstance(method, DosingMethod):
        method = get_dosing_method(parsed, method or 0)
        if method is None:
            return None

    gallons = to_float(tank_gallons) or DEFAULT_TANK_GALLONS
    deficit = tar - cur
    total = method.doses_for(deficit, gallons)
    days = max(math.ceil(deficit / method.max_change_per_day), 1)
    per_day = deficit / days
    return DosingPlan(
        kind=parsed,
        current=cur,
        target=tar,
        deficit=deficit,
        method=method,
        total_dose=total,
        days_needed=days,
        per_day_change=per_day,
        doses_per_day=method.doses_for(per_day, gallons),
        unit=get_ideal_range(parsed).unit,
    )


def clear_cache() -> None:
    _methods.cache_clear()
