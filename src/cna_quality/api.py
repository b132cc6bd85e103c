"""Public API for CNA Quality.

Example:
    >>> from cna_quality import evaluate_system
    >>>
    >>> result = evaluate_system(system)
    >>> result.quality_aspects["availability"].level
    <EvaluationLevel.POSITIVE: '+'>
    >>>
    >>> # From a TOSCA template on disk, with a config file
    >>> result = evaluate_template("shop.json", config_file=Path("cna-quality.toml"))
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .config import EvaluationConfig, load_config
from .entities import System
from .logging_config import get_logger
from .qualitymodel import EvaluationEngine, EvaluationResult, FactorGraph, build_quality_model
from .qualitymodel.catalog import validate_catalog
from .tosca import import_template, load_template

logger = get_logger(__name__)


def evaluate_system(
    system: System,
    config: Optional[EvaluationConfig] = None,
    quality_model: Optional[FactorGraph] = None,
) -> EvaluationResult:
    """Calculate all measures of a system and evaluate the quality model against them.

    Args:
        system: The architecture model to evaluate
        config: Evaluation settings (default: EvaluationConfig())
        quality_model: Factor graph to evaluate (default: the built-in
            catalog with rules bound to config.thresholds)

    Returns:
        EvaluationResult with calculated measures and one result per factor
    """
    config = config or EvaluationConfig()

    if config.validate_catalog:
        for problem in validate_catalog():
            logger.warning(f"Measure catalog: {problem}")

    if quality_model is None:
        quality_model = build_quality_model(config.thresholds)

    logger.info(f"Evaluating {system!r}")
    return EvaluationEngine(quality_model, config).evaluate(system)


def evaluate_template(
    path: Union[str, Path],
    config_file: Optional[Path] = None,
    **overrides,
) -> EvaluationResult:
    """Import a JSON TOSCA template and evaluate it.

    Configuration is loaded like ``load_config`` does: config files,
    CNA_QUALITY_* environment variables, then overrides.

    Raises:
        TemplateFormatError: If the template cannot be read as a System
        ConfigurationError: If configuration is invalid
    """
    config = load_config(config_file=config_file, **overrides)
    system = import_template(load_template(path))
    return evaluate_system(system, config)
