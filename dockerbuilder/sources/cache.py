"""Run-scoped cache for release metadata lookups.

A ``LookupCache`` is created when a run starts and dropped when it ends; it
is handed to ``CachingHttpClient`` explicitly rather than living in module
state. Only successful responses are cached, so a transient failure is
retried by the next caller within the same run.

Registry tag lookups must not go through this cache: their answer has to
reflect the registry as of the moment of the check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from dockerbuilder.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from dockerbuilder.sources.http import HttpClient, HttpError

__all__ = ["LookupCache", "CachingHttpClient"]


def _empty_entries() -> dict[tuple[str, str], object]:
    return {}


@dataclass
class LookupCache:
    """In-memory response cache keyed by (kind, url)."""

    entries: dict[tuple[str, str], object] = field(default_factory=_empty_entries)
    hits: int = 0
    misses: int = 0

    def get(self, kind: str, url: str) -> object | None:
        value = self.entries.get((kind, url))
        if value is None:
            self.misses += 1
        else:
            self.hits += 1
        return value

    def put(self, kind: str, url: str, value: object) -> None:
        self.entries[(kind, url)] = value

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)


class CachingHttpClient:
    """HttpClient decorator answering repeated GETs from a LookupCache."""

    def __init__(self, inner: HttpClient, cache: LookupCache) -> None:
        self._inner = inner
        self._cache = cache

    @property
    def cache(self) -> LookupCache:
        return self._cache

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        cached = self._cache.get("json", url)
        if isinstance(cached, dict):
            return Ok(cached)  # pyright: ignore[reportUnknownArgumentType]

        result = self._inner.get_json(url)
        if isinstance(result, Err):
            return result
        self._cache.put("json", url, result.value)
        return result

    def get_text(self, url: str) -> Result[str, HttpError]:
        cached = self._cache.get("text", url)
        if isinstance(cached, str):
            return Ok(cached)

        result = self._inner.get_text(url)
        if isinstance(result, Err):
            return result
        self._cache.put("text", url, result.value)
        return result
