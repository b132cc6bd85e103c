"""
CNA Quality - Architecture quality evaluation for cloud-native applications

Models an application as components, endpoints, links, data and
infrastructure, calculates architectural measures over that graph and
evaluates a factor model of product factors and quality aspects.
"""

__version__ = "0.1.0"

from .api import evaluate_system, evaluate_template
from .config import EvaluationConfig, RuleThresholds, load_config
from .entities import System
from .measures import NOT_APPLICABLE, CalculatedMeasures, calculate_measures
from .qualitymodel import (
    EvaluationEngine,
    EvaluationLevel,
    EvaluationResult,
    FactorGraph,
    build_quality_model,
)

__all__ = [
    "evaluate_system",  # Main entry point
    "evaluate_template",
    "EvaluationConfig",
    "RuleThresholds",
    "load_config",
    "System",
    "NOT_APPLICABLE",
    "CalculatedMeasures",
    "calculate_measures",
    "EvaluationEngine",  # Advanced usage (custom quality models)
    "EvaluationLevel",
    "EvaluationResult",
    "FactorGraph",
    "build_quality_model",
]
