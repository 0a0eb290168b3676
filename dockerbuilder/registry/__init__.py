"""Container registry lookups."""

from dockerbuilder.registry.tags import TagChecker, TagLookupError, hub_repository, tag_url

__all__ = ["TagChecker", "TagLookupError", "hub_repository", "tag_url"]
