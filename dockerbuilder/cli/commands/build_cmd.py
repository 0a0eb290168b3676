"""Build command - resolve the build list, then build and publish it."""

from __future__ import annotations

from pathlib import Path

import typer

from dockerbuilder.cli.commands._helpers import print_config, resolve_or_exit
from dockerbuilder.cli.context import RunOverrides, build_context
from dockerbuilder.services.executor import execute_plan
from dockerbuilder.services.toolchain import DockerToolchain


def build(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="TOML file with a [builder] table", show_default=False
    ),
    image: str | None = typer.Option(
        None, "--image", help="Target image (overrides IMAGE)", show_default=False
    ),
    force: bool = typer.Option(False, "--force", help="Rebuild without checking the registry"),
    force_unstable: bool = typer.Option(
        False, "--force-unstable", help="With --force, include unstable versions"
    ),
    last_only: bool = typer.Option(
        False, "--last-only", "--latest-only", help="Only consider the most recent version"
    ),
    build_only: bool = typer.Option(False, "--build-only", help="Build without pushing"),
    strict_tags: bool = typer.Option(
        False, "--strict-tags", help="Abort when a registry tag lookup fails"
    ),
) -> None:
    """Build and push images for every version missing from the registry."""
    ctx = build_context(
        config_path=config,
        overrides=RunOverrides(
            image=image,
            force=force,
            force_unstable=force_unstable,
            last_only=last_only,
            build_only=build_only,
            strict_tags=strict_tags,
        ),
    )
    print_config(ctx)

    plan = resolve_or_exit(ctx)

    toolchain = DockerToolchain(ctx.console, docker=ctx.config.docker, context=ctx.config.context)
    report = execute_plan(ctx.config, plan, toolchain, ctx.console)
    if not report.exit_code.is_success:
        raise typer.Exit(code=int(report.exit_code))
