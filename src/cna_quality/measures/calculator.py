"""Calculates every registered measure for a system."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..entities import System
from ..logging_config import get_logger
from .base import NOT_APPLICABLE, MeasureValue, is_applicable
from .component import COMPONENT_MEASURES
from .request_trace import REQUEST_TRACE_MEASURES
from .system import SYSTEM_MEASURES

logger = get_logger(__name__)


@dataclass
class CalculatedMeasures:
    """Measure values of one system, keyed by scope.

    Attributes:
        system: measure name -> value
        components: component id -> measure name -> value
        request_traces: request trace id -> measure name -> value
    """

    system: dict[str, MeasureValue] = field(default_factory=dict)
    components: dict[str, dict[str, MeasureValue]] = field(default_factory=dict)
    request_traces: dict[str, dict[str, MeasureValue]] = field(default_factory=dict)

    def get(self, name: str, default: Optional[MeasureValue] = None) -> Optional[MeasureValue]:
        """System-level value by name."""
        return self.system.get(name, default)

    def component_values(self, name: str) -> dict[str, MeasureValue]:
        """component id -> value for every component the measure was calculated for."""
        return {cid: values[name] for cid, values in self.components.items() if name in values}

    def request_trace_values(self, name: str) -> dict[str, MeasureValue]:
        return {tid: values[name] for tid, values in self.request_traces.items() if name in values}

    def applicable_values(self, name: str) -> list[float]:
        """Every applicable numeric value of a measure across all scopes."""
        values: list[MeasureValue] = []
        if name in self.system:
            values.append(self.system[name])
        values.extend(self.component_values(name).values())
        values.extend(self.request_trace_values(name).values())
        return [float(v) for v in values if is_applicable(v)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "system": dict(self.system),
            "components": {cid: dict(v) for cid, v in self.components.items()},
            "request_traces": {tid: dict(v) for tid, v in self.request_traces.items()},
        }


def _guarded(name: str, scope_id: str, calculation, *args) -> MeasureValue:
    """Run one calculator; arithmetic and value errors become NOT_APPLICABLE."""
    try:
        return calculation(*args)
    except (ArithmeticError, ValueError) as e:
        logger.warning(f"Measure {name} could not be calculated for {scope_id}: {e}")
        return NOT_APPLICABLE


def calculate_measures(
    system: System,
    include_component_measures: bool = True,
    include_request_trace_measures: bool = True,
) -> CalculatedMeasures:
    """Calculate all registered measures for the system.

    Integrity errors (e.g. an endpoint no component provides) propagate;
    the graph is never modified.
    """
    result = CalculatedMeasures()

    for name, calculation in SYSTEM_MEASURES.items():
        result.system[name] = _guarded(name, system.id, calculation, system)

    if include_component_measures:
        for component in system.components:
            result.components[component.id] = {
                name: _guarded(name, component.id, calculation, system, component)
                for name, calculation in COMPONENT_MEASURES.items()
            }

    if include_request_trace_measures:
        for trace in system.request_traces:
            result.request_traces[trace.id] = {
                name: _guarded(name, trace.id, calculation, system, trace)
                for name, calculation in REQUEST_TRACE_MEASURES.items()
            }

    logger.debug(
        f"Calculated {len(result.system)} system measures, "
        f"{len(result.components)} component and {len(result.request_traces)} request trace scopes"
    )
    return result
