"""Shared helpers for CLI commands."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

import typer

from dockerbuilder.core.errors import ErrorCode
from dockerbuilder.core.result import Err
from dockerbuilder.output.console import Style
from dockerbuilder.registry.tags import TagLookupError
from dockerbuilder.services.errors import InvalidPolicy
from dockerbuilder.services.resolver import compute_build_plan
from dockerbuilder.sources.datasources import lookup_releases

if TYPE_CHECKING:
    from dockerbuilder.cli.context import RunContext
    from dockerbuilder.services.errors import ResolveError
    from dockerbuilder.services.resolver import BuildPlan


def resolve_error_exit_code(error: ResolveError) -> int:
    match error:
        case InvalidPolicy():
            return int(ErrorCode.USER_ERROR)
        case TagLookupError():
            return int(ErrorCode.NETWORK_ERROR)
        case _ if error.kind in ("unknown_datasource", "invalid_input"):
            return int(ErrorCode.USER_ERROR)
        case _:
            return int(ErrorCode.NETWORK_ERROR)


def print_config(ctx: RunContext) -> None:
    ctx.console.header("Configuration")
    for key, value in asdict(ctx.config).items():
        ctx.console.print(f"  {key}: {value}", Style.DIM)


def resolve_or_exit(ctx: RunContext) -> BuildPlan:
    """Compute the build plan, exiting the process on a fatal resolver error."""
    cfg = ctx.config
    result = compute_build_plan(
        cfg,
        lambda: lookup_releases(
            ctx.http,
            datasource=cfg.datasource,
            lookup_name=cfg.lookup_name,
            lookup_type=cfg.lookup_type,
        ),
        ctx.scheme,
        ctx.tags.exists,
        ctx.console,
    )
    if isinstance(result, Err):
        error = result.error
        ctx.console.error(f"Error in dockerbuilder: {error.message}")
        if error.hint:
            ctx.console.print(f"hint: {error.hint}", Style.DIM)
        raise typer.Exit(code=resolve_error_exit_code(error))
    return result.value
