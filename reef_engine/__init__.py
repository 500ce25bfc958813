"""Reef tank water chemistry diagnosis and dosing engine."""

from .diagnosis import (
    Issue,
    diagnose,
    diagnose_detailed,
    get_product_suggestions,
    get_remedy_steps,
    quick_fix_recommendation,
)
from .dosing import DosingMethod, DosingPlan, get_dosing_method, list_dosing_methods, plan_dose
from .history import TestEntry, add_entries, make_entry
from .parameters import CoralPreset, IdealRange, ParameterKind, effective_ranges
from .severity import Direction, Severity, classify
from .units import ConvertedDose, DoseUnit, convert_dose, format_dose

__all__ = [
    "ParameterKind",
    "IdealRange",
    "CoralPreset",
    "effective_ranges",
    "Severity",
    "Direction",
    "classify",
    "Issue",
    "diagnose",
    "diagnose_detailed",
    "quick_fix_recommendation",
    "get_remedy_steps",
    "get_product_suggestions",
    "DosingMethod",
    "DosingPlan",
    "list_dosing_methods",
    "get_dosing_method",
    "plan_dose",
    "DoseUnit",
    "ConvertedDose",
    "convert_dose",
    "format_dose",
    "TestEntry",
    "make_entry",
    "add_entries",
]
