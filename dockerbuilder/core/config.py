"""Typed run configuration loading and access.

A run is parametrized entirely by named values. They are read, lowest
precedence first, from an optional TOML file (``[builder]`` table) and from
environment variables (``IMAGE``, ``DATASOURCE``, ...). The CLI may
layer flag overrides on top with :func:`dataclasses.replace`, and
:func:`apply_ci_override` forces a safe build-only mode on CI branches.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = [
    "BuilderConfig",
    "ConfigError",
    "TagLookupMode",
    "DOCKER_HUB_API",
    "PRIMARY_BRANCH",
    "apply_ci_override",
    "default_build_arg",
    "load_config",
    "settings_from_env",
]

TagLookupMode = Literal["optimistic", "strict"]

DOCKER_HUB_API = "https://hub.docker.com/v2"
PRIMARY_BRANCH = "master"

# Environment variable -> setting name.
_ENV_STRINGS: dict[str, str] = {
    "DATASOURCE": "datasource",
    "LOOKUP_TYPE": "lookup_type",
    "LOOKUP_NAME": "lookup_name",
    "VERSION_SCHEME": "version_scheme",
    "START_VERSION": "start_version",
    "IMAGE": "image",
    "BUILD_ARG": "build_arg",
    "TAG_LOOKUP": "tag_lookup",
    "BUILD_CONTEXT": "context",
    "DOCKER_BIN": "docker",
    "REGISTRY_URL": "registry_url",
}

_ENV_FLAGS: dict[str, str] = {
    "BUILD_ONLY": "build_only",
    "LAST_ONLY": "last_only",
    "LATEST_ONLY": "last_only",
    "FORCE": "force",
    "FORCE_UNSTABLE": "force_unstable",
}

_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when configuration cannot be loaded or is invalid."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class BuilderConfig:
    """Version policy plus executor settings for one run.

    Attributes:
        image: Target repository, e.g. ``renovate/node``.
        datasource: Release source id (``github``, ``npm``, ``pypi``, ``docker``).
        lookup_name: Package name understood by the datasource.
        lookup_type: Datasource-specific lookup flavor (``releases``/``tags``).
        version_scheme: Version scheme id used for validity, ordering, stability.
        start_version: Inclusive lower bound; None disables the bound.
        build_arg: Name of the docker build argument receiving the version.
        ignored_versions: Versions excluded unconditionally.
        last_only: Restrict candidates to the most recent version.
        force: Skip tag-existence checks.
        force_unstable: When forcing, include unstable versions too.
        build_only: Build images without pushing or re-tagging.
        tag_lookup: What a failed tag lookup means (see registry.tags).
        context: Docker build context directory.
        docker: Toolchain binary.
        registry_url: Base URL of the registry tag-listing API.
    """

    image: str
    datasource: str | None = None
    lookup_name: str | None = None
    lookup_type: str | None = None
    version_scheme: str = "semver"
    start_version: str | None = None
    build_arg: str | None = None
    ignored_versions: tuple[str, ...] = ()
    last_only: bool = False
    force: bool = False
    force_unstable: bool = False
    build_only: bool = False
    tag_lookup: TagLookupMode = "optimistic"
    context: str = "."
    docker: str = "docker"
    registry_url: str = DOCKER_HUB_API

    @property
    def effective_build_arg(self) -> str:
        """Build argument name, derived from the image when not configured."""
        return self.build_arg or default_build_arg(self.image)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> BuilderConfig:
        """Create a config from merged settings.

        Raises:
            ValueError: If ``image`` is missing or ``tag_lookup`` is unknown.
        """
        image = get_str(data, "image")
        if image is None:
            raise ValueError("image is required (set IMAGE or [builder].image)")

        tag_lookup = get_str(data, "tag_lookup") or "optimistic"
        if tag_lookup not in ("optimistic", "strict"):
            raise ValueError(f"tag_lookup must be 'optimistic' or 'strict', got {tag_lookup!r}")

        ignored = get_str_list(data, "ignored_versions") or []

        return cls(
            image=image,
            datasource=get_str(data, "datasource"),
            lookup_name=get_str(data, "lookup_name"),
            lookup_type=get_str(data, "lookup_type"),
            version_scheme=get_str(data, "version_scheme") or "semver",
            start_version=get_str(data, "start_version"),
            build_arg=get_str(data, "build_arg"),
            ignored_versions=tuple(ignored),
            last_only=get_bool(data, "last_only") or get_bool(data, "latest_only") or False,
            force=get_bool(data, "force") or False,
            force_unstable=get_bool(data, "force_unstable") or False,
            build_only=get_bool(data, "build_only") or False,
            tag_lookup="strict" if tag_lookup == "strict" else "optimistic",
            context=get_str(data, "context") or ".",
            docker=get_str(data, "docker") or "docker",
            registry_url=(get_str(data, "registry_url") or DOCKER_HUB_API).rstrip("/"),
        )


def default_build_arg(image: str) -> str:
    """Derive the build argument name from an image reference.

    ``renovate/node`` -> ``NODE_VERSION``; ``docker-compose`` -> ``DOCKER_COMPOSE_VERSION``.

    Only the last path segment is used and every character that is not a
    letter or digit becomes ``_``, so the result is always a valid Dockerfile
    ``ARG`` name. Older build scripts upper-cased the image name as is, which
    gives ``DOCKER-COMPOSE_VERSION`` for ``docker-compose``. Set ``BUILD_ARG``
    explicitly when a Dockerfile still declares that spelling.
    """
    name = image.rsplit("/", 1)[-1]
    return re.sub(r"[^A-Za-z0-9]", "_", name).upper() + "_VERSION"


def _env_flag(value: str) -> bool:
    v = value.strip().lower()
    return bool(v) and v not in _FALSE_WORDS


def settings_from_env(env: Mapping[str, str]) -> StrDict:
    """Extract settings from environment variables.

    Only variables that are set (and non-empty, for strings) are returned,
    so the result can be layered over file settings.
    """
    out: StrDict = {}
    for var, key in _ENV_STRINGS.items():
        value = env.get(var, "").strip()
        if value:
            out[key] = value

    for var, key in _ENV_FLAGS.items():
        if var in env:
            # LAST_ONLY and LATEST_ONLY are aliases: either one enables it.
            out[key] = bool(out.get(key)) or _env_flag(env[var])

    ignored = env.get("IGNORED_VERSIONS")
    if ignored:
        out["ignored_versions"] = [v.strip() for v in ignored.split(",") if v.strip()]

    return out


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file and return its ``[builder]`` table."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(get_table(data, "builder") or {})


def load_config(
    path: Path | None,
    env: Mapping[str, str],
) -> Result[BuilderConfig, ConfigError]:
    """Load configuration from an optional TOML file and the environment.

    Environment variables take precedence over file values.

    Args:
        path: Path to a TOML file, or None to use the environment only.
        env: Environment mapping (usually ``os.environ``).

    Returns:
        Ok(BuilderConfig) on success, Err(ConfigError) on failure.
    """
    settings: StrDict = {}
    if path is not None:
        parsed = _parse_toml(path)
        if isinstance(parsed, Err):
            return parsed
        settings.update(parsed.value)

    settings.update(settings_from_env(env))

    try:
        return Ok(BuilderConfig.from_dict(settings))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid configuration: {e}", path=path))


def apply_ci_override(
    config: BuilderConfig,
    env: Mapping[str, str],
    primary_branch: str = PRIMARY_BRANCH,
) -> tuple[BuilderConfig, bool]:
    """Force build-latest-only, no-push mode on non-primary CircleCI branches.

    Returns:
        The (possibly) overridden config and whether the override applied.
    """
    if env.get("CIRCLECI") != "true" or env.get("CIRCLE_BRANCH") == primary_branch:
        return config, False
    return replace(config, build_only=True, last_only=True, force=True), True
