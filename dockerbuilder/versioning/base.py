"""Version scheme protocol.

A scheme decides which strings are versions, how they order, whether a
version is a stable release, and whether a version falls below a lower
bound. The resolver only talks to this protocol.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

__all__ = ["VersionScheme", "SortKey"]

# Schemes build keys from nested tuples of ints/strings; this is kept opaque.
SortKey = tuple[object, ...]


@runtime_checkable
class VersionScheme(Protocol):
    """Pluggable version comparison capability."""

    name: str

    def is_version(self, version: str) -> bool:
        """Return True if ``version`` is a valid version under this scheme."""
        ...

    def is_stable(self, version: str) -> bool:
        """Return True if ``version`` is a stable (non pre-release) release."""
        ...

    def is_valid_bound(self, bound: str) -> bool:
        """Return True if ``bound`` can be used as a lower bound."""
        ...

    def is_less_than_range(self, version: str, bound: str) -> bool:
        """Return True if ``version`` orders strictly below ``bound``."""
        ...

    def sort_key(self, version: str) -> SortKey:
        """Key for ascending ordering of valid versions."""
        ...

    def sort(self, versions: Iterable[str]) -> list[str]:
        """Return versions in ascending order; equal versions keep input order."""
        ...
