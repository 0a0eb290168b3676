"""Plan command - show which versions a build would produce."""

from __future__ import annotations

from pathlib import Path

import typer

from dockerbuilder.cli.commands._helpers import resolve_or_exit
from dockerbuilder.cli.context import RunOverrides, build_context
from dockerbuilder.output.console import Style


def plan(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="TOML file with a [builder] table", show_default=False
    ),
    image: str | None = typer.Option(
        None, "--image", help="Target image (overrides IMAGE)", show_default=False
    ),
    force: bool = typer.Option(False, "--force", help="Ignore the registry"),
    force_unstable: bool = typer.Option(
        False, "--force-unstable", help="With --force, include unstable versions"
    ),
    last_only: bool = typer.Option(
        False, "--last-only", "--latest-only", help="Only consider the most recent version"
    ),
    strict_tags: bool = typer.Option(
        False, "--strict-tags", help="Abort when a registry tag lookup fails"
    ),
) -> None:
    """Resolve the build list without invoking docker."""
    ctx = build_context(
        config_path=config,
        overrides=RunOverrides(
            image=image,
            force=force,
            force_unstable=force_unstable,
            last_only=last_only,
            strict_tags=strict_tags,
        ),
    )

    build_plan = resolve_or_exit(ctx)

    ctx.console.header("Plan")
    for version in build_plan.versions:
        suffix = " (latest)" if version == build_plan.latest_stable_version else ""
        ctx.console.print(f"  {ctx.config.image}:{version}{suffix}")
    if build_plan.is_empty:
        ctx.console.print("  (nothing to build)", Style.DIM)
    ctx.console.print(
        f"latest -> {build_plan.latest_stable_version or '(not tagged)'}",
        Style.DIM,
    )
