"""Catalog commands: the declared measures and the factor graph."""

from typing import Optional

import typer
from rich.table import Table

from ..measures import MeasureScope, get_measure_names, scope_of
from ..qualitymodel import MEASURE_CATALOG, build_quality_model, validate_catalog
from . import app
from ._common import console


@app.command()
def measures(
    scope: Optional[MeasureScope] = typer.Option(
        None,
        "--scope",
        "-s",
        help="Only list measures of this scope",
        case_sensitive=False,
    ),
):
    """
    List every declared measure with its scope and calculation.

    [bold cyan]Examples:[/bold cyan]

      cna-quality measures

      cna-quality measures --scope component
    """
    registered = set(get_measure_names())

    table = Table(title="Measures", show_lines=False)
    table.add_column("Measure", style="cyan", no_wrap=True)
    table.add_column("Scope")
    table.add_column("Calculation")

    shown = 0
    for measure in MEASURE_CATALOG:
        if scope is not None and measure.scope is not scope:
            continue
        registered_scope = scope_of(measure.id).value if measure.id in registered else "missing"
        table.add_row(measure.id, registered_scope, measure.calculation)
        shown += 1

    console.print(table)
    console.print(f"[dim]{shown} measures[/dim]")

    problems = validate_catalog()
    for problem in problems:
        console.print(f"[yellow]Warning:[/yellow] {problem}")
    if problems:
        raise typer.Exit(1)


@app.command()
def factors():
    """
    Show the quality model: quality aspects, product factors and impacts.
    """
    graph = build_quality_model()

    aspects = Table(title="Quality aspects")
    aspects.add_column("High-level aspect", style="bold")
    aspects.add_column("Aspect", style="cyan")
    aspects.add_column("Impacted by")
    for high_level, members in graph.aspects_by_high_level_aspect().items():
        for aspect in members:
            impacts = ", ".join(
                f"{impact.source_id} ({'+' if impact.effect.value == 'positive' else '-'})"
                for impact in aspect.incoming_impacts
            )
            aspects.add_row(high_level, aspect.id, impacts)
    console.print(aspects)

    product_factors = Table(title="Product factors")
    product_factors.add_column("Factor", style="cyan", no_wrap=True)
    product_factors.add_column("Evaluated from")
    product_factors.add_column("Impacts")
    for factor in graph.product_factors.values():
        source = ", ".join(factor.measures) if factor.rule is not None else "impacting factors"
        product_factors.add_row(factor.id, source, ", ".join(graph.successors(factor.id)))
    console.print(product_factors)

    console.print(
        f"[dim]{len(graph.product_factors)} product factors, "
        f"{len(graph.quality_aspects)} quality aspects, {len(graph.impacts)} impacts[/dim]"
    )
