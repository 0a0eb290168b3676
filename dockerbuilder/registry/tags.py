"""Registry tag-existence lookups.

``TagChecker.exists`` asks the registry's tag endpoint whether
``image:version`` has been published. A 404 means "not published". Any other
failure is ambiguous, and what it means is a named policy:

- ``optimistic`` (default): warn and report the tag as missing, so the
  version gets rebuilt rather than silently skipped.
- ``strict``: return the error; the caller aborts the run.

Lookups are sequential and never cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote

from dockerbuilder.core.config import DOCKER_HUB_API, TagLookupMode
from dockerbuilder.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from dockerbuilder.output.console import ConsoleProtocol
    from dockerbuilder.sources.http import HttpClient, HttpError

__all__ = ["TagChecker", "TagLookupError", "hub_repository", "tag_url"]


@dataclass(frozen=True, slots=True)
class TagLookupError:
    """A tag lookup that failed for a reason other than "not found"."""

    image: str
    version: str
    message: str
    hint: str | None = "Set TAG_LOOKUP=optimistic to rebuild versions whose tag cannot be checked"


def hub_repository(image: str) -> str:
    """Return the ``namespace/name`` path for an image reference.

    Official images live under ``library/`` on Docker Hub.
    """
    repo = image.strip().strip("/")
    return repo if "/" in repo else f"library/{repo}"


def tag_url(image: str, version: str, registry_url: str = DOCKER_HUB_API) -> str:
    return (
        f"{registry_url.rstrip('/')}/repositories/{hub_repository(image)}"
        f"/tags/{quote(version, safe='')}"
    )


class TagChecker:
    """Checks whether image tags already exist in the registry."""

    def __init__(
        self,
        http: HttpClient,
        console: ConsoleProtocol,
        *,
        mode: TagLookupMode = "optimistic",
        registry_url: str = DOCKER_HUB_API,
    ) -> None:
        self._http = http
        self._console = console
        self._mode: TagLookupMode = mode
        self._registry_url = registry_url

    @property
    def mode(self) -> TagLookupMode:
        return self._mode

    def exists(self, image: str, version: str) -> Result[bool, TagLookupError]:
        url = tag_url(image, version, self._registry_url)
        result = self._http.get_json(url)
        if isinstance(result, Ok):
            return Ok(True)

        error: HttpError = result.error
        if error.is_not_found:
            return Ok(False)

        if self._mode == "strict":
            return Err(TagLookupError(image=image, version=version, message=str(error)))

        self._console.warning(f"Could not check {image}:{version} ({error}); assuming it is missing")
        return Ok(False)
