"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import EvaluationConfig, load_config
from ..measures import MeasureValue, is_applicable
from ..qualitymodel import EvaluationLevel

console = Console()

LEVEL_STYLES = {
    EvaluationLevel.STRONGLY_POSITIVE: "bold green",
    EvaluationLevel.POSITIVE: "green",
    EvaluationLevel.NEUTRAL: "yellow",
    EvaluationLevel.NEGATIVE: "red",
    EvaluationLevel.STRONGLY_NEGATIVE: "bold red",
    EvaluationLevel.UNKNOWN: "dim",
}


def format_level(level: EvaluationLevel) -> str:
    style = LEVEL_STYLES[level]
    return f"[{style}]{level.value}[/{style}]"


def format_value(value: MeasureValue) -> str:
    """Numbers with up to four decimals; not-applicable values dimmed."""
    if not is_applicable(value):
        return f"[dim]{value}[/dim]"
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}"


def resolve_config(
    config: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> EvaluationConfig:
    """Build the evaluation config from CLI options."""
    overrides = {}
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)
