"""Loose versioning for upstreams that do not follow SemVer.

Accepts one to four dot-separated numbers with an optional suffix that starts
with a letter (``1.2``, ``3.9.0b1``, ``2.4.1-alpine``, ``1.0.0.4``). Missing
numeric components count as zero. Any suffix marks the version unstable and
orders below the bare release. Python packages should use ``pep440``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from dockerbuilder.versioning.base import SortKey

_LOOSE_RE = re.compile(r"^v?(\d+(?:\.\d+){0,3})(?:[-.+_]?([A-Za-z][0-9A-Za-z.+_-]*))?$")
_SUFFIX_SPLIT_RE = re.compile(r"[.+_-]")


def _parse(version: str) -> tuple[tuple[int, ...], str | None] | None:
    m = _LOOSE_RE.match(version.strip())
    if m is None:
        return None
    nums = tuple(int(n) for n in m.group(1).split("."))
    return nums + (0,) * (4 - len(nums)), m.group(2)


def _key(parsed: tuple[tuple[int, ...], str | None]) -> SortKey:
    nums, suffix = parsed
    if suffix is None:
        return (nums, 1, ())
    parts = tuple(
        (0, int(p), "") if p.isdigit() else (1, 0, p.lower())
        for p in _SUFFIX_SPLIT_RE.split(suffix)
        if p
    )
    return (nums, 0, parts)


class LooseScheme:
    name = "loose"

    def is_version(self, version: str) -> bool:
        return _parse(version) is not None

    def is_stable(self, version: str) -> bool:
        parsed = _parse(version)
        return parsed is not None and parsed[1] is None

    def is_valid_bound(self, bound: str) -> bool:
        return _parse(bound) is not None

    def is_less_than_range(self, version: str, bound: str) -> bool:
        v = _parse(version)
        b = _parse(bound)
        if v is None or b is None:
            raise ValueError(f"cannot compare {version!r} with bound {bound!r}")
        return _key(v) < _key(b)

    def sort_key(self, version: str) -> SortKey:
        parsed = _parse(version)
        if parsed is None:
            raise ValueError(f"not a loose version: {version!r}")
        return _key(parsed)

    def sort(self, versions: Iterable[str]) -> list[str]:
        return sorted(versions, key=self.sort_key)
