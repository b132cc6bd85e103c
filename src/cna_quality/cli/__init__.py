"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="cna-quality",
    help="CNA Quality - Architecture quality evaluation for cloud-native applications",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    if version:
        console.print(f"cna-quality {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


# Import subcommands to register them
from .catalog import factors as _factors, measures as _measures  # noqa: F401, E402
from .evaluate import evaluate as _evaluate  # noqa: F401, E402
