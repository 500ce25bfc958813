"""Water parameter definitions, ideal ranges and coral type presets."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .utils import load_dataset, normalize_key

RANGE_FILE = "ideal_ranges.json"
PRESET_FILE = "coral_presets.json"

__all__ = [
    "ParameterKind",
    "IdealRange",
    "CoralPreset",
    "get_base_ranges",
    "get_ideal_range",
    "list_coral_presets",
    "get_coral_preset",
    "effective_ranges",
    "get_effective_range",
]


class ParameterKind(str, Enum):
    """Water parameters tracked by the tank log."""

    NITRATE = "nitrate"
    PH = "ph"
    ALKALINITY = "alkalinity"
    CALCIUM = "calcium"
    PHOSPHATE = "phosphate"
    SALINITY = "salinity"
    TEMPERATURE = "temperature"
    MAGNESIUM = "magnesium"
    AMMONIA = "ammonia"
    NITRITE = "nitrite"

    @classmethod
    def parse(cls, value: Any) -> "ParameterKind | None":
        """Return the member matching ``value`` or ``None`` if unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(normalize_key(value))
        except ValueError:
            return None

    @property
    def is_toxin(self) -> bool:
        """``True`` for parameters where any detectable amount is an emergency."""
        return self in (ParameterKind.AMMONIA, ParameterKind.NITRITE)


@dataclass(slots=True, frozen=True)
class IdealRange:
    """Acceptable band for a parameter."""

    min: float
    max: float
    unit: str = ""
    label: str = ""

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError(f"Invalid range for {self.label or 'parameter'}: {self.min} > {self.max}")

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def with_bounds(self, low: float, high: float) -> "IdealRange":
        """Return a copy with new bounds keeping unit and label."""
        return IdealRange(float(low), float(high), self.unit, self.label)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class CoralPreset:
    """Range overrides for a tank dominated by one coral group."""

    key: str
    label: str
    description: str
    adjustments: Mapping[ParameterKind, tuple[float, float]] = field(default_factory=dict)


@lru_cache(maxsize=None)
def get_base_ranges() -> Mapping[ParameterKind, IdealRange]:
    """Return the base ideal range for every :class:`ParameterKind`.

    Every kind must be present in the dataset so downstream lookups never
    have to handle a missing parameter.
    """

    data = load_dataset(RANGE_FILE)
    ranges: Dict[ParameterKind, IdealRange] = {}
    for kind in ParameterKind:
        entry = data.get(kind.value)
        if not isinstance(entry, Mapping):
            raise ValueError(f"{RANGE_FILE} is missing a range for {kind.value}")
        ranges[kind] = IdealRange(
            float(entry["min"]),
            float(entry["max"]),
            str(entry.get("unit", "")),
            str(entry.get("label", kind.value)),
        )
    return MappingProxyType(ranges)


def get_ideal_range(kind: ParameterKind) -> IdealRange:
    """Return the base ideal range for ``kind``."""
    return get_base_ranges()[kind]


@lru_cache(maxsize=None)
def _load_presets() -> Mapping[str, CoralPreset]:
    presets: Dict[str, CoralPreset] = {}
    for key, entry in load_dataset(PRESET_FILE).items():
        if not isinstance(entry, Mapping):
            continue
        adjustments: Dict[ParameterKind, tuple[float, float]] = {}
        for name, bounds in (entry.get("adjustments") or {}).items():
            kind = ParameterKind.parse(name)
            if kind is None or not isinstance(bounds, Mapping):
                continue
            adjustments[kind] = (float(bounds["min"]), float(bounds["max"]))
        preset_key = normalize_key(key)
        presets[preset_key] = CoralPreset(
            key=preset_key,
            label=str(entry.get("label", key)),
            description=str(entry.get("description", "")),
            adjustments=MappingProxyType(adjustments),
        )
    return MappingProxyType(presets)


def list_coral_presets() -> list[str]:
    """Return all coral preset keys in dataset order."""
    return list(_load_presets().keys())


def get_coral_preset(coral_type: str | None) -> CoralPreset | None:
    """Return the preset for ``coral_type`` or ``None`` when unknown or blank."""
    if not coral_type:
        return None
    return _load_presets().get(normalize_key(coral_type))


def effective_ranges(coral_type: str | None = None) -> Dict[ParameterKind, IdealRange]:
    """Return ideal ranges with ``coral_type`` overrides applied.

    Only kinds named by the preset change; the rest keep their base range.
    Unit and label always come from the base range.
    """

    ranges = dict(get_base_ranges())
    preset = get_coral_preset(coral_type)
    if preset is None:
        return ranges
    for kind, (low, high) in preset.adjustments.items():
        ranges[kind] = ranges[kind].with_bounds(low, high)
    return ranges


def get_effective_range(kind: ParameterKind, coral_type: str | None = None) -> IdealRange:
    """Return the effective range of a single parameter."""
    return effective_ranges(coral_type)[kind]


def clear_cache() -> None:
    get_base_ranges.cache_clear()
    _load_presets.cache_clear()
