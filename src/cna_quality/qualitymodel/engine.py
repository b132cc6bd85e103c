"""Evaluation engine: walks the factor graph over one system's calculated measures.

Per factor and run the states are:

    UNEVALUATED -> EVALUATING -> EVALUATED
                              -> UNKNOWN   (inputs missing or not applicable)

Evaluating a factor first evaluates the product factors at the source of
its incoming impacts. A factor reached again while it is EVALUATING (a
cycle) contributes UNKNOWN to the factor that reached it; that placeholder
is not memoized. All memoized results live in an EvaluationRun, which is
created fresh for every evaluation.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Optional

from ..config import EvaluationConfig
from ..entities import System
from ..exceptions import MissingMeasureError
from ..logging_config import get_logger
from ..measures import CalculatedMeasures, calculate_measures
from .factors import Factor, FactorGraph
from .levels import EvaluationLevel, aggregate_levels, describe_contributions
from .results import EvaluationResult, FactorEvaluationResult, unknown

logger = get_logger(__name__)


class FactorState(Enum):
    UNEVALUATED = "unevaluated"
    EVALUATING = "evaluating"
    EVALUATED = "evaluated"
    UNKNOWN = "unknown"


class EvaluationRun:
    """Memoized evaluation of one factor graph against one set of measures."""

    def __init__(self, graph: FactorGraph, measures: CalculatedMeasures):
        self.graph = graph
        self.measures = measures
        self.results: dict[str, FactorEvaluationResult] = {}
        self._in_progress: set[str] = set()

    def state(self, factor_id: str) -> FactorState:
        if factor_id in self._in_progress:
            return FactorState.EVALUATING
        result = self.results.get(factor_id)
        if result is None:
            return FactorState.UNEVALUATED
        return FactorState.EVALUATED if result.is_known else FactorState.UNKNOWN

    def evaluate_factor(self, factor_id: str) -> FactorEvaluationResult:
        if factor_id in self.results:
            return self.results[factor_id]

        if factor_id in self._in_progress:
            logger.debug(f"Cycle reached {factor_id}; contributing unknown")
            return unknown(factor_id, "cyclic impact: factor is still being evaluated")

        factor = self.graph.get_factor(factor_id)
        self._in_progress.add(factor_id)
        try:
            if factor.rule is not None:
                # Sources first, so the rule sees their results
                for impact in factor.incoming_impacts:
                    self.evaluate_factor(impact.source_id)
                result = self._apply_rule(factor)
            else:
                contributions = [
                    impact.contribution(self.evaluate_factor(impact.source_id).level)
                    for impact in factor.incoming_impacts
                ]
                result = self._aggregate(factor, contributions)
        finally:
            self._in_progress.discard(factor_id)

        self.results[factor_id] = result
        logger.debug(f"Evaluated {factor_id}: {result.level.value} ({result.reasoning})")
        return result

    def _apply_rule(self, factor: Factor) -> FactorEvaluationResult:
        evaluated = MappingProxyType(self.results)
        try:
            result = factor.rule(factor, self.measures, evaluated)
        except MissingMeasureError as e:
            return unknown(factor.id, f"{e.measure} {e.reason}")

        if result.factor_id != factor.id:
            result = FactorEvaluationResult(factor.id, result.level, result.reasoning)
        return result

    def _aggregate(
        self, factor: Factor, contributions: list[EvaluationLevel]
    ) -> FactorEvaluationResult:
        if not contributions:
            return unknown(factor.id, "no evaluation rule and no impacting factors")

        level = aggregate_levels(contributions)
        reasoning = f"aggregated from impacts: {describe_contributions(contributions)}"
        return FactorEvaluationResult(factor.id, level, reasoning)


class EvaluationEngine:
    """Calculates measures for a system and evaluates every factor of a quality model.

    Example:
        >>> engine = EvaluationEngine(build_quality_model())
        >>> result = engine.evaluate(system)
        >>> result.quality_aspects["availability"].level
    """

    def __init__(self, quality_model: FactorGraph, config: Optional[EvaluationConfig] = None):
        self.quality_model = quality_model
        self.config = config or EvaluationConfig()

    def evaluate(self, system: System) -> EvaluationResult:
        measures = calculate_measures(
            system,
            include_component_measures=self.config.include_component_measures,
            include_request_trace_measures=self.config.include_request_trace_measures,
        )
        return self.evaluate_measures(system.id, measures)

    def evaluate_measures(self, system_id: str, measures: CalculatedMeasures) -> EvaluationResult:
        """Evaluate all factors against already calculated measures."""
        run = EvaluationRun(self.quality_model, measures)

        result = EvaluationResult(system_id=system_id, measures=measures)
        for factor_id in self.quality_model.product_factors:
            result.product_factors[factor_id] = run.evaluate_factor(factor_id)
        for factor_id in self.quality_model.quality_aspects:
            result.quality_aspects[factor_id] = run.evaluate_factor(factor_id)

        unknown_count = sum(
            1
            for r in list(result.product_factors.values()) + list(result.quality_aspects.values())
            if not r.is_known
        )
        logger.info(
            f"Evaluated {len(self.quality_model)} factors for {system_id}, {unknown_count} unknown"
        )
        return result
