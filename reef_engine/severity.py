"""Severity classification for out-of-range readings."""

from __future__ import annotations

from enum import Enum

from .parameters import IdealRange, ParameterKind

__all__ = [
    "Severity",
    "Direction",
    "SEVERITY_RANK",
    "CRITICAL_FRACTION",
    "WARNING_FRACTION",
    "MIN_SPAN",
    "classify",
]


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    ATTENTION = "attention"


class Direction(str, Enum):
    LOW = "low"
    HIGH = "high"


# Presentation order, most dangerous first
SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.WARNING: 1,
    Severity.ATTENTION: 2,
}

# Distance outside the range as a fraction of the range width
CRITICAL_FRACTION = 0.5
WARNING_FRACTION = 0.2

# Heuristic floor for the range width so zero-width bands such as ammonia's
# 0-0 keep the ratio defined. Not derived from chemistry.
MIN_SPAN = 1.0


def classify(
    kind: ParameterKind,
    value: float,
    effective_range: IdealRange,
    direction: Direction,
) -> Severity:
    """Return how far ``value`` strays outside ``effective_range``.

    Ammonia and nitrite are zero tolerance: any positive reading is
    critical regardless of distance. Other parameters are graded by the
    distance past the violated bound relative to the width of the range.
    Callers are expected to pass a value already outside the range with
    the matching ``direction``.
    """

    if kind.is_toxin and value > 0:
        return Severity.CRITICAL

    span = max(effective_range.max - effective_range.min, MIN_SPAN)
    if direction is Direction.LOW:
        distance = effective_range.min - value
    else:
        distance = value - effective_range.max

    fraction = distance / span
    if fraction > CRITICAL_FRACTION:
        return Severity.CRITICAL
    if fraction > WARNING_FRACTION:
        return Severity.WARNING
    return Severity.ATTENTION
