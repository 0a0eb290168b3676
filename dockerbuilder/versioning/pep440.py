"""PEP 440 versioning for Python packages (the ``pypi`` datasource).

Parsing and ordering are delegated to :class:`packaging.version.Version`, so
``1.0rc1 < 1.0 < 1.0.post1`` and epochs, dev and local segments order the
way pip orders them. Pre- and dev-releases are unstable; post-releases are
stable.
"""

from __future__ import annotations

from collections.abc import Iterable

from packaging.version import InvalidVersion, Version

from dockerbuilder.versioning.base import SortKey


def _parse(version: str) -> Version | None:
    try:
        return Version(version.strip())
    except InvalidVersion:
        return None


class Pep440Scheme:
    name = "pep440"

    def is_version(self, version: str) -> bool:
        return _parse(version) is not None

    def is_stable(self, version: str) -> bool:
        v = _parse(version)
        return v is not None and not (v.is_prerelease or v.is_devrelease)

    def is_valid_bound(self, bound: str) -> bool:
        return _parse(bound) is not None

    def is_less_than_range(self, version: str, bound: str) -> bool:
        v = _parse(version)
        b = _parse(bound)
        if v is None or b is None:
            raise ValueError(f"cannot compare {version!r} with bound {bound!r}")
        return v < b

    def sort_key(self, version: str) -> SortKey:
        v = _parse(version)
        if v is None:
            raise ValueError(f"not a PEP 440 version: {version!r}")
        return (v,)

    def sort(self, versions: Iterable[str]) -> list[str]:
        return sorted(versions, key=self.sort_key)
