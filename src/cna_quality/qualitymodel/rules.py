"""Evaluation rules for product factors.

A rule has the signature ``rule(factor, measures, evaluated) -> FactorEvaluationResult``.
Rules that depend on thresholds are built by factories taking RuleThresholds.
A rule raises MissingMeasureError when an input is absent or not
applicable; the engine turns that into an UNKNOWN result.
"""

from __future__ import annotations

from typing import Mapping

from ..config import RuleThresholds
from ..exceptions import MissingMeasureError
from ..math import Statistics
from ..measures import CalculatedMeasures, is_applicable
from .factors import EvaluationRule, Factor
from .levels import EvaluationLevel
from .results import FactorEvaluationResult

Evaluated = Mapping[str, FactorEvaluationResult]


# ── Measure access ─────────────────────────────────────────────────


def system_value(measures: CalculatedMeasures, name: str) -> float:
    """A system-level value, or MissingMeasureError if absent or not applicable."""
    value = measures.get(name)
    if value is None:
        raise MissingMeasureError(name)
    if not is_applicable(value):
        raise MissingMeasureError(name, reason="not applicable")
    return float(value)


def component_values(measures: CalculatedMeasures, name: str) -> list[float]:
    values = [float(v) for v in measures.component_values(name).values() if is_applicable(v)]
    if not values:
        raise MissingMeasureError(name, reason="no applicable component value")
    return values


def request_trace_values(measures: CalculatedMeasures, name: str) -> list[float]:
    values = [float(v) for v in measures.request_trace_values(name).values() if is_applicable(v)]
    if not values:
        raise MissingMeasureError(name, reason="no applicable request trace value")
    return values


def available_values(measures: CalculatedMeasures, *names: str) -> list[tuple[str, float]]:
    """(name, value) for every applicable system-level measure among names.

    Raises MissingMeasureError naming all of them if none is available.
    """
    found = []
    for name in names:
        value = measures.get(name)
        if value is not None and is_applicable(value):
            found.append((name, float(value)))
    if not found:
        raise MissingMeasureError(" / ".join(names), reason="not applicable")
    return found


def band(value: float, low: float, high: float, higher_is_better: bool = True) -> EvaluationLevel:
    """POSITIVE at or above high, NEGATIVE at or below low, NEUTRAL in between.

    Reversed when lower values are better.
    """
    if value >= high:
        level = EvaluationLevel.POSITIVE
    elif value <= low:
        level = EvaluationLevel.NEGATIVE
    else:
        level = EvaluationLevel.NEUTRAL
    return level if higher_is_better else level.flipped()


def _result(factor: Factor, level: EvaluationLevel, reasoning: str) -> FactorEvaluationResult:
    return FactorEvaluationResult(factor.id, level, reasoning)


def _fmt(value: float) -> str:
    return f"{value:.2f}"


# ── Rule factories ─────────────────────────────────────────────────


def ratio_rule(
    measure: str, thresholds: RuleThresholds, higher_is_better: bool = True
) -> EvaluationRule:
    """Band a system-level ratio; the extreme ends (0 or 1) count as strong."""

    def rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
        value = system_value(measures, measure)
        level = band(value, thresholds.low_ratio, thresholds.high_ratio, higher_is_better)
        if value in (0.0, 1.0) and level is EvaluationLevel.POSITIVE:
            level = EvaluationLevel.STRONGLY_POSITIVE
        elif value in (0.0, 1.0) and level is EvaluationLevel.NEGATIVE:
            level = EvaluationLevel.STRONGLY_NEGATIVE
        return _result(factor, level, f"{measure} is {_fmt(value)}")

    return rule


def secured_communication_rule(thresholds: RuleThresholds) -> EvaluationRule:
    """Mean of TLS coverage of external endpoints and of links."""

    def rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
        found = available_values(
            measures, "ratioOfExternalEndpointsSupportingTls", "ratioOfSecuredLinks"
        )
        value = Statistics.mean([v for _, v in found])
        level = band(value, thresholds.low_ratio, thresholds.high_ratio)
        if value == 1.0:
            level = EvaluationLevel.STRONGLY_POSITIVE
        elif value == 0.0:
            level = EvaluationLevel.STRONGLY_NEGATIVE
        parts = ", ".join(f"{name} is {_fmt(v)}" for name, v in found)
        return _result(factor, level, parts)

    return rule


def replication_rule(measure: str, thresholds: RuleThresholds) -> EvaluationRule:
    """Average replica count against min_replicas and good_replicas."""

    def rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
        value = system_value(measures, measure)
        if value >= thresholds.good_replicas:
            level = EvaluationLevel.STRONGLY_POSITIVE
        elif value >= thresholds.min_replicas:
            level = EvaluationLevel.POSITIVE
        elif value <= 1:
            level = EvaluationLevel.NEGATIVE
        else:
            level = EvaluationLevel.NEUTRAL
        return _result(factor, level, f"{measure} is {_fmt(value)} replicas on average")

    return rule


def sharding_rule(thresholds: RuleThresholds) -> EvaluationRule:
    def rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
        value = system_value(measures, "dataShardingLevel")
        if value >= thresholds.good_replicas:
            level = EvaluationLevel.STRONGLY_POSITIVE
        elif value >= thresholds.min_replicas:
            level = EvaluationLevel.POSITIVE
        else:
            level = EvaluationLevel.NEUTRAL
        return _result(factor, level, f"storage is split into {_fmt(value)} shards on average")

    return rule


def coupling_rule(thresholds: RuleThresholds) -> EvaluationRule:
    """Lower coupling is better; uses every applicable coupling degree."""

    def rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
        found = available_values(
            measures, "couplingDegreeBasedOnPotentialCoupling", "degreeOfCouplingInASystem"
        )
        value = Statistics.mean([v for _, v in found])
        level = band(value, thresholds.low_coupling, thresholds.high_coupling, higher_is_better=False)
        parts = ", ".join(f"{name} is {_fmt(v)}" for name, v in found)
        return _result(factor, level, parts)

    return rule


def cohesion_rule(thresholds: RuleThresholds) -> EvaluationRule:
    def rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
        values = component_values(measures, "totalServiceInterfaceCohesion")
        value = Statistics.mean(values)
        level = band(value, thresholds.low_cohesion, thresholds.high_cohesion)
        return _result(
            factor,
            level,
            f"mean totalServiceInterfaceCohesion is {_fmt(value)} over {len(values)} components",
        )

    return rule


def interaction_density_rule(thresholds: RuleThresholds) -> EvaluationRule:
    def rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
        value = Statistics.mean(component_values(measures, "numberOfLinksPerComponent"))
        limit = thresholds.max_links_per_component
        if value > limit:
            level = EvaluationLevel.NEGATIVE
        elif value > limit / 2:
            level = EvaluationLevel.NEUTRAL
        else:
            level = EvaluationLevel.POSITIVE
        return _result(factor, level, f"{_fmt(value)} links per component on average (limit {_fmt(limit)})")

    return rule


def request_trace_length_rule(thresholds: RuleThresholds) -> EvaluationRule:
    def rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
        longest = max(request_trace_values(measures, "requestTraceLength"))
        limit = thresholds.max_request_trace_length
        if longest > limit:
            level = EvaluationLevel.NEGATIVE
        elif longest > limit / 2:
            level = EvaluationLevel.NEUTRAL
        else:
            level = EvaluationLevel.POSITIVE
        return _result(factor, level, f"longest request trace has {int(longest)} steps (limit {limit})")

    return rule


def acyclic_communication_rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
    """No revisited component in any request trace is positive."""
    cycles = request_trace_values(measures, "numberOfCyclesInRequestTraces")
    total = int(sum(cycles))
    if total == 0:
        return _result(factor, EvaluationLevel.POSITIVE, f"no cycles in {len(cycles)} request traces")
    level = EvaluationLevel.STRONGLY_NEGATIVE if total >= len(cycles) else EvaluationLevel.NEGATIVE
    return _result(factor, level, f"{total} cycles in {len(cycles)} request traces")


def data_replication_rule(thresholds: RuleThresholds) -> EvaluationRule:
    """Less data replicated along request traces is better."""

    def rule(factor: Factor, measures: CalculatedMeasures, evaluated: Evaluated):
        value = Statistics.mean(request_trace_values(measures, "dataReplicationAlongRequestTrace"))
        level = band(value, thresholds.low_ratio, thresholds.high_ratio, higher_is_better=False)
        return _result(factor, level, f"mean dataReplicationAlongRequestTrace is {_fmt(value)}")

    return rule
