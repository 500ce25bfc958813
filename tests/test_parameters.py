import pytest

from reef_engine.parameters import (
    IdealRange,
    ParameterKind,
    effective_ranges,
    get_base_ranges,
    get_coral_preset,
    get_effective_range,
    get_ideal_range,
    list_coral_presets,
)


def test_every_kind_has_a_base_range():
    ranges = get_base_ranges()
    assert set(ranges) == set(ParameterKind)
    for rng in ranges.values():
        assert rng.min <= rng.max


def test_base_range_values():
    calcium = get_ideal_range(ParameterKind.CALCIUM)
    assert (calcium.min, calcium.max, calcium.unit) == (380, 450, "ppm")
    assert get_ideal_range(ParameterKind.AMMONIA).max == 0
    assert get_ideal_range(ParameterKind.TEMPERATURE).unit == "°F"


def test_parse_kind():
    assert ParameterKind.parse("Calcium") is ParameterKind.CALCIUM
    assert ParameterKind.parse(" pH ") is ParameterKind.PH
    assert ParameterKind.parse(ParameterKind.NITRITE) is ParameterKind.NITRITE
    assert ParameterKind.parse("silicate") is None
    assert ParameterKind.parse(None) is None


def test_toxins():
    assert ParameterKind.AMMONIA.is_toxin
    assert ParameterKind.NITRITE.is_toxin
    assert not ParameterKind.NITRATE.is_toxin


def test_invalid_range_rejected():
    with pytest.raises(ValueError):
        IdealRange(5, 1)


def test_list_coral_presets():
    assert list_coral_presets() == ["sps", "lps", "mixed", "softie"]
    sps = get_coral_preset("SPS")
    assert sps.label == "SPS Dominant"
    assert sps.adjustments[ParameterKind.CALCIUM] == (420, 460)
    assert get_coral_preset("unknown") is None
    assert get_coral_preset("") is None


def test_preset_only_changes_named_kinds():
    base = get_base_ranges()
    sps = get_coral_preset("sps")
    ranges = effective_ranges("sps")
    for kind in ParameterKind:
        if kind in sps.adjustments:
            assert (ranges[kind].min, ranges[kind].max) == sps.adjustments[kind]
        else:
            assert ranges[kind] == base[kind]


def test_preset_keeps_unit_and_label():
    calcium = get_effective_range(ParameterKind.CALCIUM, "sps")
    assert calcium.min == 420
    assert calcium.max == 460
    assert calcium.unit == "ppm"
    assert calcium.label == "Calcium"


def test_unknown_preset_uses_base_ranges():
    assert effective_ranges("reef-of-dreams") == dict(get_base_ranges())
    assert effective_ranges(None) == dict(get_base_ranges())
