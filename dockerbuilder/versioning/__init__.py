"""Pluggable version schemes, looked up by id."""

from dockerbuilder.versioning.base import SortKey, VersionScheme
from dockerbuilder.versioning.loose import LooseScheme
from dockerbuilder.versioning.pep440 import Pep440Scheme
from dockerbuilder.versioning.semver import SemverScheme

__all__ = [
    "LooseScheme",
    "Pep440Scheme",
    "SemverScheme",
    "SortKey",
    "VersionScheme",
    "available_schemes",
    "get_scheme",
]

_SCHEMES: dict[str, VersionScheme] = {
    "semver": SemverScheme(),
    "pep440": Pep440Scheme(),
    "loose": LooseScheme(),
}


def get_scheme(name: str) -> VersionScheme | None:
    """Return the scheme registered under ``name``, or None."""
    return _SCHEMES.get(name.strip().lower())


def available_schemes() -> tuple[str, ...]:
    return tuple(sorted(_SCHEMES))
