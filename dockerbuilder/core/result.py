"""Result type for explicit error handling.

Collaborator calls (release lookups, tag lookups, docker invocations) return
``Ok(value)`` or ``Err(error)`` instead of raising, so the resolver and the
executor decide locally whether a failure is fatal or per-version.

Usage:
    match lookup_releases(http, datasource="npm", lookup_name="pnpm"):
        case Ok(releases):
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result carrying an error value."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
