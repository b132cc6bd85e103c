"""Configuration loading and management for CNA Quality.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in EvaluationConfig)
    2. Global config (~/.cna-quality.toml)
    3. Project config (./cna-quality.toml)
    4. Explicit config file
    5. Environment variables (CNA_QUALITY_* prefix)
    6. Overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True)
    >>> config.verbosity
    'verbose'
    >>> config.thresholds.high_ratio
    0.75
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "CNA_QUALITY_"


@dataclass(frozen=True)
class RuleThresholds:
    """Thresholds used by the product factor evaluation rules.

    Ratios are in [0, 1]. A ratio at or above ``high_ratio`` counts as
    clearly good (or clearly bad, depending on the rule), one at or below
    ``low_ratio`` as clearly the opposite; anything in between is neutral.

    Attributes:
        Ratios:
            low_ratio: Upper bound of the "low" band
            high_ratio: Lower bound of the "high" band

        Replication:
            min_replicas: Average replica count below which replication is negative
            good_replicas: Average replica count from which replication is strongly positive

        Request traces:
            max_request_trace_length: Longest acceptable trace (number of link steps)

        Coupling / cohesion:
            max_links_per_component: Average links per component considered acceptable
            low_coupling: Coupling degree at or below which coupling is positive
            high_coupling: Coupling degree at or above which coupling is negative
            low_cohesion: Cohesion at or below which cohesion is negative
            high_cohesion: Cohesion at or above which cohesion is positive
    """

    low_ratio: float = 0.25
    high_ratio: float = 0.75

    min_replicas: float = 2.0
    good_replicas: float = 3.0

    max_request_trace_length: int = 5

    max_links_per_component: float = 4.0
    low_coupling: float = 0.3
    high_coupling: float = 0.6
    low_cohesion: float = 0.3
    high_cohesion: float = 0.7

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        unit_fields = [
            "low_ratio",
            "high_ratio",
            "low_coupling",
            "high_coupling",
            "low_cohesion",
            "high_cohesion",
        ]
        for field_name in unit_fields:
            value = getattr(self, field_name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{field_name} must be between 0.0 and 1.0")

        if self.low_ratio > self.high_ratio:
            raise ValueError("low_ratio must not exceed high_ratio")
        if self.low_coupling > self.high_coupling:
            raise ValueError("low_coupling must not exceed high_coupling")
        if self.low_cohesion > self.high_cohesion:
            raise ValueError("low_cohesion must not exceed high_cohesion")

        if self.min_replicas < 1:
            raise ValueError("min_replicas must be at least 1")
        if self.good_replicas < self.min_replicas:
            raise ValueError("good_replicas must be at least min_replicas")
        if self.max_request_trace_length < 1:
            raise ValueError("max_request_trace_length must be at least 1")
        if self.max_links_per_component <= 0:
            raise ValueError("max_links_per_component must be positive")


DEFAULT_THRESHOLDS = RuleThresholds()


@dataclass(frozen=True)
class EvaluationConfig:
    """Configuration for an evaluation run.

    Attributes:
        Measure scopes:
            include_component_measures: Calculate per-component measures
            include_request_trace_measures: Calculate per-request-trace measures

        Integrity:
            validate_catalog: Check the measure registries against the catalog
                before evaluating and log every mismatch

        Output control:
            verbosity: Logging verbosity level

        Rules:
            thresholds: Thresholds consumed by the product factor rules
    """

    include_component_measures: bool = True
    include_request_trace_measures: bool = True

    validate_catalog: bool = True

    verbosity: Verbosity = "normal"

    thresholds: RuleThresholds = field(default_factory=RuleThresholds)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")


def load_config(config_file: Optional[Path] = None, **overrides) -> EvaluationConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated EvaluationConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".cna-quality.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "cna-quality.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Verbosity flags become the verbosity literal
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    thresholds_dict = merged.pop("thresholds", None)
    if thresholds_dict is not None:
        if isinstance(thresholds_dict, dict):
            try:
                merged["thresholds"] = RuleThresholds(**thresholds_dict)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid [thresholds] config: {e}")
        elif isinstance(thresholds_dict, RuleThresholds):
            merged["thresholds"] = thresholds_dict

    try:
        return EvaluationConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CNA_QUALITY_* environment variables.

    Supported environment variables:
        CNA_QUALITY_INCLUDE_COMPONENT_MEASURES: bool (true/false/1/0)
        CNA_QUALITY_INCLUDE_REQUEST_TRACE_MEASURES: bool
        CNA_QUALITY_VALIDATE_CATALOG: bool
        CNA_QUALITY_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any CNA_QUALITY_* vars found.
    """
    type_hints = get_type_hints(EvaluationConfig)

    result: dict[str, Any] = {}

    for field_name in EvaluationConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns None for types that cannot be expressed as a single variable
    (nested dataclasses such as ``thresholds``).

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
