"""Upstream release sources.

This package provides:
- HTTP client protocol and implementations (http.py)
- Run-scoped lookup cache (cache.py)
- Release enumeration per datasource (datasources.py)
"""

from dockerbuilder.sources.cache import CachingHttpClient, LookupCache
from dockerbuilder.sources.datasources import (
    SUPPORTED_DATASOURCES,
    Release,
    ReleaseLookupError,
    ReleaseSet,
    lookup_releases,
)
from dockerbuilder.sources.http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    "SUPPORTED_DATASOURCES",
    "CachingHttpClient",
    "HttpClient",
    "HttpError",
    "LookupCache",
    "MockHttpClient",
    "RealHttpClient",
    "Release",
    "ReleaseLookupError",
    "ReleaseSet",
    "lookup_releases",
]
