"""Measure registry: the three name-keyed calculator tables.

A measure name belongs to exactly one scope. Whether every registered name
has a catalog entry is checked by ``validate_registries`` rather than at
import time.
"""

from typing import Iterable, Protocol, Union

from .base import (
    ComponentCalculation,
    MeasureScope,
    RequestTraceCalculation,
    SystemCalculation,
)
from .component import COMPONENT_MEASURES
from .request_trace import REQUEST_TRACE_MEASURES
from .system import SYSTEM_MEASURES

Calculation = Union[SystemCalculation, ComponentCalculation, RequestTraceCalculation]

MEASURE_TABLES: dict[MeasureScope, dict[str, Calculation]] = {
    MeasureScope.SYSTEM: SYSTEM_MEASURES,  # type: ignore[dict-item]
    MeasureScope.COMPONENT: COMPONENT_MEASURES,  # type: ignore[dict-item]
    MeasureScope.REQUEST_TRACE: REQUEST_TRACE_MEASURES,  # type: ignore[dict-item]
}


class DeclaredMeasure(Protocol):
    """What the registry needs to know about a catalog measure."""

    id: str
    scope: MeasureScope
    calculation: str


def get_measure_names(scope: Union[MeasureScope, None] = None) -> list[str]:
    """Registered names, for one scope or all of them in table order."""
    if scope is not None:
        return list(MEASURE_TABLES[scope])
    return [name for table in MEASURE_TABLES.values() for name in table]


def get_calculation(name: str) -> Calculation:
    """Look up a calculator by measure name."""
    for table in MEASURE_TABLES.values():
        if name in table:
            return table[name]
    raise KeyError(f"Unknown measure: {name!r}")


def scope_of(name: str) -> MeasureScope:
    for scope, table in MEASURE_TABLES.items():
        if name in table:
            return scope
    raise KeyError(f"Unknown measure: {name!r}")


def validate_registries(catalog: Iterable[DeclaredMeasure]) -> list[str]:
    """Check the calculator tables against the catalog's measure declarations.

    Returns one message per problem; an empty list means the registries are
    consistent:
        - a name registered in more than one table
        - a registered name the catalog does not declare
        - a registered name declared under a different scope
        - a declared measure with a calculator but no calculation description
        - a catalog id declared twice
    """
    problems: list[str] = []

    seen: dict[str, MeasureScope] = {}
    for scope, table in MEASURE_TABLES.items():
        for name in table:
            if name in seen:
                problems.append(
                    f"{name} is registered as both {seen[name].value} and {scope.value} measure"
                )
            else:
                seen[name] = scope

    declared: dict[str, DeclaredMeasure] = {}
    for measure in catalog:
        if measure.id in declared:
            problems.append(f"{measure.id} is declared more than once in the catalog")
        declared[measure.id] = measure

    for name, scope in seen.items():
        measure = declared.get(name)
        if measure is None:
            problems.append(f"{name} has a calculator but no catalog entry")
            continue
        if measure.scope is not scope:
            problems.append(
                f"{name} is declared as {measure.scope.value} but registered as {scope.value}"
            )
        if not measure.calculation.strip():
            problems.append(f"{name} has a calculator but no calculation description")

    return problems
