"""Convert dosing amounts into kitchen measures for display."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .dosing import DosingMethod

__all__ = [
    "DoseUnit",
    "ConvertedDose",
    "ML_PER_TSP",
    "ML_PER_TBSP",
    "TSP_PER_TBSP",
    "LIQUID_G_PER_ML",
    "FALLBACK_G_PER_TSP",
    "convert_dose",
    "format_value",
    "format_dose",
]


class DoseUnit(str, Enum):
    TSP = "tsp"
    TBSP = "tbsp"
    ML = "ml"
    G = "g"

    @property
    def full_label(self) -> str:
        return {
            DoseUnit.TSP: "Teaspoons",
            DoseUnit.TBSP: "Tablespoons",
            DoseUnit.ML: "Milliliters",
            DoseUnit.G: "Grams",
        }[self]


# Approximate kitchen measures used for hobby dosing guidance
ML_PER_TSP = 4.93
ML_PER_TBSP = 14.79
TSP_PER_TBSP = 3
# Approximate density of pre-mixed liquid supplements
LIQUID_G_PER_ML = 1.05
# Used when a powder has no measured grams per teaspoon
FALLBACK_G_PER_TSP = 4.0


@dataclass(slots=True, frozen=True)
class ConvertedDose:
    value: float
    label: str

    def __str__(self) -> str:
        return f"{format_value(self.value)} {self.label}"


def _parse_unit(unit: Any) -> DoseUnit | None:
    if isinstance(unit, DoseUnit):
        return unit
    try:
        return DoseUnit(str(unit).strip().lower())
    except ValueError:
        return None


def convert_dose(
    dose: float, method: DosingMethod | None, unit: DoseUnit | str
) -> ConvertedDose:
    """Return ``dose`` (in the method's standard amount) in ``unit``.

    Liquid products (``ml_per_dose`` set) are converted through milliliters.
    Powders are measured in teaspoons. Unknown units or a missing method
    return the value unchanged with the standard unit label.
    """

    target = _parse_unit(unit)
    if method is None:
        return ConvertedDose(dose, DoseUnit.TSP.value)

    if method.ml_per_dose:
        ml = dose * method.ml_per_dose
        if target is DoseUnit.TSP:
            return ConvertedDose(ml / ML_PER_TSP, target.value)
        if target is DoseUnit.TBSP:
            return ConvertedDose(ml / ML_PER_TBSP, target.value)
        if target is DoseUnit.G:
            return ConvertedDose(ml * LIQUID_G_PER_ML, target.value)
        return ConvertedDose(ml, DoseUnit.ML.value)

    if target is DoseUnit.TBSP:
        return ConvertedDose(dose / TSP_PER_TBSP, target.value)
    if target is DoseUnit.ML:
        return ConvertedDose(dose * ML_PER_TSP, target.value)
    if target is DoseUnit.G:
        grams = method.grams_per_std_amount or FALLBACK_G_PER_TSP
        return ConvertedDose(dose * grams, target.value)
    return ConvertedDose(dose, DoseUnit.TSP.value)


def format_value(value: float) -> str:
    """Return ``value`` rounded for display based on its magnitude."""
    if value < 0.01:
        return f"{value:.3f}"
    if value < 1:
        return f"{value:.2f}"
    if value < 10:
        return f"{value:.1f}"
    return str(int(value + 0.5))


def format_dose(dose: float, method: DosingMethod | None, unit: DoseUnit | str) -> str:
    """Return a display string such as ``"2.4 tsp"``."""
    return str(convert_dose(dose, method, unit))
