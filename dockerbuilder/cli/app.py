from __future__ import annotations

import typer

from dockerbuilder import __version__
from dockerbuilder.cli.commands.build_cmd import build
from dockerbuilder.cli.commands.plan_cmd import plan


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Build and publish container images for upstream releases.",
)


# Commands
app.command()(build)
app.command()(plan)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


def main() -> None:
    app()
