"""Measure calculators over the architecture graph."""

from .base import NOT_APPLICABLE, MeasureScope, MeasureValue, is_applicable
from .calculator import CalculatedMeasures, calculate_measures
from .component import COMPONENT_MEASURES
from .registry import (
    MEASURE_TABLES,
    get_calculation,
    get_measure_names,
    scope_of,
    validate_registries,
)
from .request_trace import REQUEST_TRACE_MEASURES
from .system import SYSTEM_MEASURES

__all__ = [
    "NOT_APPLICABLE",
    "MeasureScope",
    "MeasureValue",
    "is_applicable",
    "CalculatedMeasures",
    "calculate_measures",
    "COMPONENT_MEASURES",
    "REQUEST_TRACE_MEASURES",
    "SYSTEM_MEASURES",
    "MEASURE_TABLES",
    "get_calculation",
    "get_measure_names",
    "scope_of",
    "validate_registries",
]
