"""Quality model: factor graph, evaluation rules and the evaluation engine."""

from .catalog import (
    IMPACTS,
    MEASURE_CATALOG,
    MeasureDefinition,
    build_quality_model,
    get_measure_definition,
    validate_catalog,
)
from .engine import EvaluationEngine, EvaluationRun, FactorState
from .factors import Factor, FactorGraph, Impact, ImpactEffect, ProductFactor, QualityAspect
from .levels import EvaluationLevel, aggregate_levels
from .results import EvaluationResult, FactorEvaluationResult

__all__ = [
    "IMPACTS",
    "MEASURE_CATALOG",
    "MeasureDefinition",
    "build_quality_model",
    "get_measure_definition",
    "validate_catalog",
    "EvaluationEngine",
    "EvaluationRun",
    "FactorState",
    "Factor",
    "FactorGraph",
    "Impact",
    "ImpactEffect",
    "ProductFactor",
    "QualityAspect",
    "EvaluationLevel",
    "aggregate_levels",
    "EvaluationResult",
    "FactorEvaluationResult",
]
