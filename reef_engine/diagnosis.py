"""Diagnose water test readings against ideal ranges."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .constants import DEFAULT_TANK_GALLONS
from .parameters import IdealRange, ParameterKind, effective_ranges
from .severity import SEVERITY_RANK, Direction, Severity, classify
from .utils import load_dataset, to_float

STEPS_FILE = "remedy_steps.json"
PRODUCTS_FILE = "product_recommendations.json"

__all__ = [
    "Issue",
    "RemedyStep",
    "ProductSuggestion",
    "diagnose",
    "diagnose_detailed",
    "diagnose_entry",
    "quick_fix_recommendation",
    "get_remedy_steps",
    "get_product_suggestions",
    "reading_status",
]


@dataclass(slots=True, frozen=True)
class Issue:
    """A parameter reading outside its effective range."""

    kind: ParameterKind
    direction: Direction
    value: float
    range: IdealRange
    severity: Severity

    def as_dict(self) -> Dict[str, Any]:
        return {
            "param": self.kind.value,
            "status": self.direction.value,
            "value": self.value,
            "range": self.range.as_dict(),
            "severity": self.severity.value,
        }


@dataclass(slots=True, frozen=True)
class RemedyStep:
    step: str
    detail: str


@dataclass(slots=True, frozen=True)
class ProductSuggestion:
    name: str
    url: str | None
    note: str


def diagnose(
    readings: Mapping[Any, Any],
    tank_gallons: Any = None,
    coral_type: str | None = None,
) -> list[Issue]:
    """Return out-of-range issues for ``readings`` ordered most severe first.

    ``readings`` maps parameter names (or :class:`ParameterKind`) to raw form
    values. Unknown names and blank or non-numeric values are skipped. Ties in
    severity keep the order the readings were given in. When several keys name
    the same parameter (``"calcium"`` and ``"Calcium"``) only the first usable
    reading counts. ``tank_gallons`` does not influence the result; it is
    accepted so callers can pass the whole tank configuration.
    """

    ranges = effective_ranges(coral_type)
    issues: list[Issue] = []
    seen: set[ParameterKind] = set()
    for key, raw in readings.items():
        kind = ParameterKind.parse(key)
        value = to_float(raw)
        if kind is None or value is None or kind in seen:
            continue
        seen.add(kind)
        rng = ranges[kind]
        if value < rng.min:
            direction = Direction.LOW
        elif value > rng.max:
            direction = Direction.HIGH
        else:
            continue
        issues.append(
            Issue(kind, direction, value, rng, classify(kind, value, rng, direction))
        )

    # sorted() is stable so equal severities keep encounter order
    return sorted(issues, key=lambda issue: SEVERITY_RANK[issue.severity])


def diagnose_entry(entry: Any) -> list[Issue]:
    """Return issues for a stored test entry using its own tank settings."""
    return diagnose(entry.params, entry.tank_gallons, entry.coral_type)


def _gallons(tank_gallons: Any) -> float:
    value = to_float(tank_gallons)
    return value if value else DEFAULT_TANK_GALLONS


def _num(value: float) -> str:
    return f"{value:g}"


def _round_half_up(value: float) -> int:
    # round() would use banker's rounding on .5
    return math.floor(value + 0.5)


def quick_fix_recommendation(
    kind: ParameterKind,
    value: float,
    rng: IdealRange,
    tank_gallons: Any = None,
) -> str | None:
    """Return a one line corrective action for an issue or ``None``.

    Dose sizes scale linearly with the tank volume. The water change
    percentages are rule-of-thumb values capped at 30% (alkalinity) and 50%
    (nitrate).
    """

    gal = _gallons(tank_gallons)
    if kind is ParameterKind.CALCIUM and value < rng.min:
        tsp = (rng.min - value) / 19 * (gal / 50)
        return (
            f"Add ~{tsp:.1f} tsp calcium chloride to raise from {_num(value)} "
            f"to ~{_num(rng.min)} ppm. Max 20 ppm/day."
        )
    if kind is ParameterKind.ALKALINITY and value < rng.min:
        tsp = (rng.min - value) * (gal / 40)
        return (
            f"Add ~{tsp:.1f} tsp soda ash to raise from {_num(value)} "
            f"to ~{_num(rng.min)} dKH. Max 1.4 dKH/day."
        )
    if kind is ParameterKind.ALKALINITY and value > rng.max:
        pct = min(_round_half_up((value - rng.max) / rng.max * 100 + 10), 30)
        return f"Perform a {pct}% water change. Retest after 24 hours."
    if kind is ParameterKind.MAGNESIUM and value < rng.min:
        parts = (rng.min - value) / 100 * (gal / 50)
        return (
            f"Add ~{parts * 6:.1f} tsp mag chloride + {parts * 4:.1f} tsp "
            "mag sulfate. Max 100 ppm/day."
        )
    if kind is ParameterKind.NITRATE and value > rng.max:
        pct = min(_round_half_up((value - rng.max) / value * 100 + 10), 50)
        return f"Perform a {pct}% water change."
    if kind is ParameterKind.PHOSPHATE and value > rng.max:
        return "Run GFO in a reactor or media bag. Max 0.03 ppm reduction/day."
    if kind is ParameterKind.AMMONIA and value > 0:
        return "URGENT: Dose Seachem Prime (5ml/50gal) + 25-50% water change NOW."
    if kind is ParameterKind.NITRITE and value > 0:
        return "URGENT: Dose Seachem Prime + 25% water change. Add bottled bacteria."
    return None


@lru_cache(maxsize=None)
def _remedy_table() -> Mapping[tuple[ParameterKind, Direction], tuple[RemedyStep, ...]]:
    table: Dict[tuple[ParameterKind, Direction], tuple[RemedyStep, ...]] = {}
    for name, by_direction in load_dataset(STEPS_FILE).items():
        kind = ParameterKind.parse(name)
        if kind is None or not isinstance(by_direction, Mapping):
            continue
        for direction in Direction:
            steps = by_direction.get(direction.value) or []
            table[(kind, direction)] = tuple(
                RemedyStep(str(s["step"]), str(s.get("detail", ""))) for s in steps
            )
    return MappingProxyType(table)


@lru_cache(maxsize=None)
def _product_table() -> Mapping[tuple[ParameterKind, Direction], tuple[ProductSuggestion, ...]]:
    table: Dict[tuple[ParameterKind, Direction], tuple[ProductSuggestion, ...]] = {}
    for name, by_direction in load_dataset(PRODUCTS_FILE).items():
        kind = ParameterKind.parse(name)
        if kind is None or not isinstance(by_direction, Mapping):
            continue
        for direction in Direction:
            products = by_direction.get(direction.value) or []
            table[(kind, direction)] = tuple(
                ProductSuggestion(str(p["name"]), p.get("url"), str(p.get("note", "")))
                for p in products
            )
    return MappingProxyType(table)


def get_remedy_steps(kind: ParameterKind, direction: Direction) -> list[RemedyStep]:
    """Return step-by-step remedy instructions or an empty list."""
    return list(_remedy_table().get((kind, direction), ()))


def get_product_suggestions(
    kind: ParameterKind, direction: Direction
) -> list[ProductSuggestion]:
    """Return suggested products for a low/high parameter or an empty list."""
    return list(_product_table().get((kind, direction), ()))


def diagnose_detailed(
    readings: Mapping[Any, Any],
    tank_gallons: Any = None,
    coral_type: str | None = None,
) -> list[Dict[str, Any]]:
    """Return issues with quick fix, remedy steps and product suggestions."""

    result: list[Dict[str, Any]] = []
    for issue in diagnose(readings, tank_gallons, coral_type):
        info = issue.as_dict()
        info["label"] = issue.range.label
        info["quick_fix"] = quick_fix_recommendation(
            issue.kind, issue.value, issue.range, tank_gallons
        )
        info["steps"] = [
            {"step": s.step, "detail": s.detail}
            for s in get_remedy_steps(issue.kind, issue.direction)
        ]
        info["products"] = [
            {"name": p.name, "url": p.url, "note": p.note}
            for p in get_product_suggestions(issue.kind, issue.direction)
        ]
        result.append(info)
    return result


def reading_status(kind: ParameterKind, value: float, coral_type: str | None = None) -> str:
    """Return ``ok``, ``warning`` or ``critical`` for a single reading.

    Used for compact status pills; ``attention`` issues show as ``warning``.
    """

    rng = effective_ranges(coral_type)[kind]
    if rng.contains(value):
        return "ok"
    direction = Direction.LOW if value < rng.min else Direction.HIGH
    if classify(kind, value, rng, direction) is Severity.CRITICAL:
        return "critical"
    return "warning"


def clear_cache() -> None:
    _remedy_table.cache_clear()
    _product_table.cache_clear()
