import pytest

from reef_engine.parameters import IdealRange, ParameterKind, get_ideal_range
from reef_engine.severity import SEVERITY_RANK, Direction, Severity, classify

CALCIUM = get_ideal_range(ParameterKind.CALCIUM)  # 380-450, span 70


@pytest.mark.parametrize(
    "value, expected",
    [
        (340, Severity.CRITICAL),  # 40 / 70
        (345, Severity.WARNING),  # exactly 0.5
        (360, Severity.WARNING),  # 20 / 70
        (366, Severity.ATTENTION),  # exactly 0.2
        (375, Severity.ATTENTION),
    ],
)
def test_calcium_low(value, expected):
    assert classify(ParameterKind.CALCIUM, value, CALCIUM, Direction.LOW) is expected


def test_high_direction_measures_from_max():
    assert classify(ParameterKind.CALCIUM, 500, CALCIUM, Direction.HIGH) is Severity.CRITICAL
    assert classify(ParameterKind.CALCIUM, 470, CALCIUM, Direction.HIGH) is Severity.WARNING
    assert classify(ParameterKind.CALCIUM, 455, CALCIUM, Direction.HIGH) is Severity.ATTENTION


@pytest.mark.parametrize("value", [0.01, 0.25, 5])
def test_toxins_always_critical(value):
    for kind in (ParameterKind.AMMONIA, ParameterKind.NITRITE):
        rng = get_ideal_range(kind)
        assert classify(kind, value, rng, Direction.HIGH) is Severity.CRITICAL


def test_narrow_range_uses_minimum_span():
    ph = get_ideal_range(ParameterKind.PH)  # 7.8-8.4 is narrower than 1
    assert classify(ParameterKind.PH, 7.7, ph, Direction.LOW) is Severity.ATTENTION
    assert classify(ParameterKind.PH, 7.5, ph, Direction.LOW) is Severity.WARNING
    assert classify(ParameterKind.PH, 7.2, ph, Direction.LOW) is Severity.CRITICAL


def test_zero_width_range_does_not_divide_by_zero():
    rng = IdealRange(0, 0, "ppm", "Zero")
    assert classify(ParameterKind.NITRATE, 0.1, rng, Direction.HIGH) is Severity.ATTENTION
    assert classify(ParameterKind.NITRATE, 0.6, rng, Direction.HIGH) is Severity.CRITICAL


def test_rank_order():
    ordered = sorted(Severity, key=SEVERITY_RANK.get)
    assert ordered == [Severity.CRITICAL, Severity.WARNING, Severity.ATTENTION]
