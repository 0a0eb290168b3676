from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from dockerbuilder.versioning.base import SortKey

_IDENT = r"(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"
_SEMVER_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)
# Lower bounds may omit minor/patch: "1" == "1.0.0", "1.4" == "1.4.0".
_BOUND_RE = re.compile(
    r"^v?(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?(?:\.(0|[1-9]\d*))?"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?$"
)


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def key(self) -> SortKey:
        # A release sorts after all of its pre-releases. Numeric identifiers
        # sort before alphanumeric ones and compare as integers.
        pre = tuple((0, int(p), "") if p.isdigit() else (1, 0, p) for p in self.prerelease)
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, pre)


def _split_prerelease(raw: str | None) -> tuple[str, ...]:
    return tuple(raw.split(".")) if raw else ()


def parse_semver(version: str) -> SemVer | None:
    m = _SEMVER_RE.match(version)
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), _split_prerelease(m.group(4)))


def parse_bound(bound: str) -> SemVer | None:
    m = _BOUND_RE.match(bound.strip())
    if m is None:
        return None
    return SemVer(
        int(m.group(1)),
        int(m.group(2) or 0),
        int(m.group(3) or 0),
        _split_prerelease(m.group(4)),
    )


class SemverScheme:
    """Semantic Versioning 2.0 (build metadata ignored for ordering)."""

    name = "semver"

    def is_version(self, version: str) -> bool:
        return parse_semver(version) is not None

    def is_stable(self, version: str) -> bool:
        v = parse_semver(version)
        return v is not None and not v.is_prerelease

    def is_valid_bound(self, bound: str) -> bool:
        return parse_bound(bound) is not None

    def is_less_than_range(self, version: str, bound: str) -> bool:
        v = parse_semver(version)
        b = parse_bound(bound)
        if v is None or b is None:
            raise ValueError(f"cannot compare {version!r} with bound {bound!r}")
        return v.key() < b.key()

    def sort_key(self, version: str) -> SortKey:
        v = parse_semver(version)
        if v is None:
            raise ValueError(f"not a semver version: {version!r}")
        return v.key()

    def sort(self, versions: Iterable[str]) -> list[str]:
        return sorted(versions, key=self.sort_key)
