"""Measure value types and the not-applicable sentinel."""

from enum import Enum
from typing import Callable, Union

from ..entities import Component, RequestTrace, System

NOT_APPLICABLE = "n/a"

MeasureValue = Union[int, float, str]

SystemCalculation = Callable[[System], MeasureValue]
ComponentCalculation = Callable[[System, Component], MeasureValue]
RequestTraceCalculation = Callable[[System, RequestTrace], MeasureValue]


class MeasureScope(Enum):
    """What a measure is calculated for."""

    SYSTEM = "system"
    COMPONENT = "component"
    REQUEST_TRACE = "request_trace"


def is_applicable(value: MeasureValue) -> bool:
    return value != NOT_APPLICABLE


def ratio(numerator: float, denominator: float) -> MeasureValue:
    """numerator / denominator, NOT_APPLICABLE for a zero denominator."""
    if denominator == 0:
        return NOT_APPLICABLE
    return numerator / denominator
