"""Evaluate command: import a TOSCA template and evaluate its quality."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..api import evaluate_system
from ..exceptions import CnaQualityError
from ..logging_config import setup_logging
from ..qualitymodel import EvaluationResult, build_quality_model
from ..tosca import import_template, load_template
from . import app
from ._common import console, format_level, format_value, resolve_config


@app.command()
def evaluate(
    template: Path = typer.Argument(
        ...,
        help="TOSCA service template (JSON)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show component and request trace measures and debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress logging",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
):
    """
    Calculate measures for an architecture and evaluate its quality aspects.

    [bold cyan]Examples:[/bold cyan]

      cna-quality evaluate shop.json

      cna-quality evaluate shop.json --format json > result.json

      cna-quality evaluate shop.json --verbose --config cna-quality.toml
    """
    if fmt not in ("rich", "json"):
        console.print(f"[red]Error:[/red] Unknown format {fmt!r} (use rich or json)")
        raise typer.Exit(2)

    try:
        settings = resolve_config(config=config, verbose=verbose, quiet=quiet)
        setup_logging(settings.verbosity)
        system = import_template(load_template(template))
        result = evaluate_system(system, settings, build_quality_model(settings.thresholds))
    except CnaQualityError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if fmt == "json":
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _output_rich(result, verbose=verbose)


def _output_rich(result: EvaluationResult, verbose: bool = False) -> None:
    console.print()
    console.print(f"[bold cyan]CNA QUALITY: {result.system_id}[/bold cyan]")
    console.print()

    measures = Table(title="System measures")
    measures.add_column("Measure", style="cyan")
    measures.add_column("Value", justify="right")
    for name, value in result.measures.system.items():
        measures.add_row(name, format_value(value))
    console.print(measures)

    if verbose:
        for title, scoped in (
            ("Component", result.measures.components),
            ("Request trace", result.measures.request_traces),
        ):
            for scope_id, values in scoped.items():
                table = Table(title=f"{title} {scope_id}")
                table.add_column("Measure", style="cyan")
                table.add_column("Value", justify="right")
                for name, value in values.items():
                    table.add_row(name, format_value(value))
                console.print(table)

    for title, results in (
        ("Product factors", result.product_factors),
        ("Quality aspects", result.quality_aspects),
    ):
        table = Table(title=title)
        table.add_column("Factor", style="cyan", no_wrap=True)
        table.add_column("Level", justify="center")
        table.add_column("Reasoning")
        for factor_id, factor_result in results.items():
            table.add_row(factor_id, format_level(factor_result.level), factor_result.reasoning)
        console.print(table)

    unknown = [
        r.factor_id
        for r in list(result.product_factors.values()) + list(result.quality_aspects.values())
        if not r.is_known
    ]
    if unknown:
        console.print(f"[dim]{len(unknown)} factors could not be evaluated[/dim]")
