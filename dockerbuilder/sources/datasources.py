"""Release enumeration for upstream packages.

Each datasource turns a package lookup name into a ``ReleaseSet``: the raw,
unordered version strings the upstream publishes plus, where the upstream
designates one, a "latest" hint. Filtering and ordering are left to the
resolver.

Supported datasources:
- github (lookup type ``releases`` or ``tags``), aliases github-releases / github-tags
- npm (hint: ``dist-tags.latest``)
- pypi (hint: ``info.version``)
- docker (Docker Hub tags)

All functions take an HttpClient parameter for testability.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal
from urllib.parse import quote

from dockerbuilder.core.config import DOCKER_HUB_API
from dockerbuilder.core.result import Err, Ok, Result
from dockerbuilder.core.structured import as_obj_list, as_str_dict, get_list, get_str, get_table
from dockerbuilder.registry.tags import hub_repository

if TYPE_CHECKING:
    from dockerbuilder.sources.http import HttpClient, HttpError

__all__ = [
    "Release",
    "ReleaseSet",
    "ReleaseLookupError",
    "SUPPORTED_DATASOURCES",
    "lookup_releases",
    "github_releases",
    "npm_releases",
    "pypi_releases",
    "docker_hub_tags",
]

SUPPORTED_DATASOURCES = ("github", "github-releases", "github-tags", "npm", "pypi", "docker")

_GITHUB_PER_PAGE = 100
_GITHUB_MAX_PAGES = 10
_DOCKER_MAX_PAGES = 20


@dataclass(frozen=True, slots=True)
class Release:
    version: str


@dataclass(frozen=True, slots=True)
class ReleaseSet:
    """Versions published upstream, in no particular order.

    Attributes:
        releases: One record per published version string.
        latest_version: Upstream's own "latest" designation, if it has one.
    """

    releases: tuple[Release, ...]
    latest_version: str | None = None

    @property
    def versions(self) -> list[str]:
        return [r.version for r in self.releases]

    @classmethod
    def of(cls, versions: list[str], latest_version: str | None = None) -> ReleaseSet:
        return cls(releases=tuple(Release(v) for v in versions), latest_version=latest_version)


@dataclass(frozen=True, slots=True)
class ReleaseLookupError:
    kind: Literal["unknown_datasource", "invalid_input", "http", "invalid_payload"]
    message: str
    hint: str | None = None


def _http_error(error: HttpError, what: str) -> ReleaseLookupError:
    hint = None
    if error.status in (403, 429):
        hint = "Rate limited: set GITHUB_TOKEN for GitHub lookups, or retry later"
    return ReleaseLookupError(kind="http", message=f"failed to fetch {what}: {error}", hint=hint)


def _payload_error(url: str, detail: str) -> ReleaseLookupError:
    return ReleaseLookupError(kind="invalid_payload", message=f"{detail} ({url})")


def github_releases(
    http: HttpClient,
    repo: str,
    lookup_type: Literal["releases", "tags"] = "releases",
) -> Result[ReleaseSet, ReleaseLookupError]:
    """List release tag names (or plain tag names) of a GitHub repository.

    Draft releases are skipped. Pages are fetched until a short page is
    returned, up to a fixed page limit.
    """
    field_name = "tag_name" if lookup_type == "releases" else "name"
    versions: list[str] = []

    for page in range(1, _GITHUB_MAX_PAGES + 1):
        url = (
            f"https://api.github.com/repos/{repo}/{lookup_type}"
            f"?per_page={_GITHUB_PER_PAGE}&page={page}"
        )
        # The API returns a JSON array, so we use get_text and parse manually
        text = http.get_text(url)
        if isinstance(text, Err):
            return Err(_http_error(text.error, f"{repo} {lookup_type}"))

        try:
            items = as_obj_list(json.loads(text.value))
        except json.JSONDecodeError as e:
            return Err(_payload_error(url, f"JSON parse error: {e}"))
        if items is None:
            return Err(_payload_error(url, "Expected JSON array"))

        for item_obj in items:
            item = as_str_dict(item_obj)
            if item is None or item.get("draft") is True:
                continue
            name = get_str(item, field_name)
            if name is not None:
                versions.append(name)

        if len(items) < _GITHUB_PER_PAGE:
            break

    return Ok(ReleaseSet.of(versions))


def npm_releases(http: HttpClient, package: str) -> Result[ReleaseSet, ReleaseLookupError]:
    url = f"https://registry.npmjs.org/{quote(package, safe='@')}"
    result = http.get_json(url)
    if isinstance(result, Err):
        return Err(_http_error(result.error, f"npm package {package}"))

    versions = get_table(result.value, "versions")
    if versions is None:
        return Err(_payload_error(url, "Missing versions in registry document"))

    dist_tags = get_table(result.value, "dist-tags") or {}
    return Ok(ReleaseSet.of(list(versions), latest_version=get_str(dist_tags, "latest")))


def pypi_releases(http: HttpClient, package: str) -> Result[ReleaseSet, ReleaseLookupError]:
    url = f"https://pypi.org/pypi/{quote(package, safe='')}/json"
    result = http.get_json(url)
    if isinstance(result, Err):
        return Err(_http_error(result.error, f"PyPI package {package}"))

    releases = get_table(result.value, "releases")
    if releases is None:
        return Err(_payload_error(url, "Missing releases in project document"))

    info = get_table(result.value, "info") or {}
    return Ok(ReleaseSet.of(list(releases), latest_version=get_str(info, "version")))


def docker_hub_tags(
    http: HttpClient,
    image: str,
    registry_url: str = DOCKER_HUB_API,
) -> Result[ReleaseSet, ReleaseLookupError]:
    """List tag names of a Docker Hub repository, following ``next`` links."""
    url: str | None = (
        f"{registry_url.rstrip('/')}/repositories/{hub_repository(image)}/tags?page_size=100"
    )
    versions: list[str] = []
    pages = 0

    while url is not None and pages < _DOCKER_MAX_PAGES:
        result = http.get_json(url)
        if isinstance(result, Err):
            return Err(_http_error(result.error, f"tags of {image}"))
        pages += 1

        results = get_list(result.value, "results")
        if results is None:
            return Err(_payload_error(url, "Missing results in tag listing"))

        for item_obj in results:
            item = as_str_dict(item_obj)
            if item is None:
                continue
            name = get_str(item, "name")
            if name is not None:
                versions.append(name)

        url = get_str(result.value, "next")

    return Ok(ReleaseSet.of(versions))


def lookup_releases(
    http: HttpClient,
    *,
    datasource: str | None,
    lookup_name: str | None,
    lookup_type: str | None = None,
) -> Result[ReleaseSet, ReleaseLookupError]:
    """Enumerate upstream releases through the named datasource.

    Args:
        http: HTTP client (usually a caching client scoped to the run)
        datasource: Datasource id, see SUPPORTED_DATASOURCES
        lookup_name: Package name, e.g. ``nodejs/node`` or ``pnpm``
        lookup_type: ``releases`` or ``tags`` for the github datasource

    Returns:
        Ok with ReleaseSet, or Err with ReleaseLookupError
    """
    if not datasource or datasource not in SUPPORTED_DATASOURCES:
        return Err(
            ReleaseLookupError(
                kind="unknown_datasource",
                message=f"unknown datasource: {datasource or '(unset)'}",
                hint=f"Supported: {', '.join(SUPPORTED_DATASOURCES)}",
            )
        )
    if not lookup_name:
        return Err(
            ReleaseLookupError(
                kind="invalid_input",
                message="lookup name is required",
                hint="Set LOOKUP_NAME",
            )
        )

    match datasource:
        case "github-releases":
            return github_releases(http, lookup_name, "releases")
        case "github-tags":
            return github_releases(http, lookup_name, "tags")
        case "github":
            if lookup_type not in (None, "releases", "tags"):
                return Err(
                    ReleaseLookupError(
                        kind="invalid_input",
                        message=f"unknown github lookup type: {lookup_type}",
                        hint="Use LOOKUP_TYPE=releases or LOOKUP_TYPE=tags",
                    )
                )
            return github_releases(http, lookup_name, "tags" if lookup_type == "tags" else "releases")
        case "npm":
            return npm_releases(http, lookup_name)
        case "pypi":
            return pypi_releases(http, lookup_name)
        case _:
            return docker_hub_tags(http, lookup_name)
