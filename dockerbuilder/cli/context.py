from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

import typer

from dockerbuilder.core.config import BuilderConfig, apply_ci_override, load_config
from dockerbuilder.core.errors import ErrorCode
from dockerbuilder.core.result import Err
from dockerbuilder.output.console import ConsoleProtocol, RichConsole, Style
from dockerbuilder.registry.tags import TagChecker
from dockerbuilder.sources.cache import CachingHttpClient, LookupCache
from dockerbuilder.sources.http import HttpClient, RealHttpClient
from dockerbuilder.versioning import VersionScheme, available_schemes, get_scheme


@dataclass(frozen=True, slots=True)
class RunOverrides:
    """CLI flags layered over file/environment configuration.

    Flags can only switch a behavior on; None/False leaves the loaded value.
    """

    image: str | None = None
    force: bool = False
    force_unstable: bool = False
    last_only: bool = False
    build_only: bool = False
    strict_tags: bool = False

    def apply(self, config: BuilderConfig) -> BuilderConfig:
        return replace(
            config,
            image=self.image or config.image,
            force=config.force or self.force,
            force_unstable=config.force_unstable or self.force_unstable,
            last_only=config.last_only or self.last_only,
            build_only=config.build_only or self.build_only,
            tag_lookup="strict" if self.strict_tags else config.tag_lookup,
        )


@dataclass(frozen=True, slots=True)
class RunContext:
    """Everything one run needs; the lookup cache lives exactly as long as this."""

    config: BuilderConfig
    console: ConsoleProtocol
    scheme: VersionScheme
    http: HttpClient
    tags: TagChecker
    cache: LookupCache


def build_context(
    *,
    config_path: Path | None = None,
    overrides: RunOverrides | None = None,
    env: Mapping[str, str] | None = None,
) -> RunContext:
    env = os.environ if env is None else env
    console = RichConsole()
    overrides = overrides or RunOverrides()

    # --image may stand in for IMAGE, so satisfy the required setting first.
    load_env = dict(env)
    if overrides.image:
        load_env["IMAGE"] = overrides.image

    config_result = load_config(config_path, load_env)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    config = overrides.apply(config_result.value)

    config, overridden = apply_ci_override(config, env)
    if overridden:
        console.print("CircleCI branch detected - Force building latest, no push", Style.WARNING)

    scheme = get_scheme(config.version_scheme)
    if scheme is None:
        console.error(f"unknown version scheme: {config.version_scheme}")
        console.print(f"Available: {', '.join(available_schemes())}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    raw_http = RealHttpClient(github_token=env.get("GITHUB_TOKEN") or None)
    cache = LookupCache()
    return RunContext(
        config=config,
        console=console,
        scheme=scheme,
        http=CachingHttpClient(raw_http, cache),
        tags=TagChecker(
            raw_http,
            console,
            mode=config.tag_lookup,
            registry_url=config.registry_url,
        ),
        cache=cache,
    )
