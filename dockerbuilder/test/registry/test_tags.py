"""Tests for registry/tags.py - tag existence lookups."""

from __future__ import annotations

from dockerbuilder.core.result import Err, Ok
from dockerbuilder.output.console import MockConsole
from dockerbuilder.registry.tags import TagChecker, hub_repository, tag_url
from dockerbuilder.sources.http import HttpError, MockHttpClient

_URL = "https://hub.docker.com/v2/repositories/renovate/node/tags/20.1.0"


def test_hub_repository() -> None:
    assert hub_repository("renovate/node") == "renovate/node"
    assert hub_repository("ruby") == "library/ruby"


def test_tag_url() -> None:
    assert tag_url("renovate/node", "20.1.0") == _URL
    assert (
        tag_url("ruby", "3.2.0+1", "https://registry.example.com/v2/")
        == "https://registry.example.com/v2/repositories/library/ruby/tags/3.2.0%2B1"
    )


class TestTagChecker:
    def test_existing_tag(self) -> None:
        http = MockHttpClient()
        http.set_json(_URL, {"name": "20.1.0"})

        assert TagChecker(http, MockConsole()).exists("renovate/node", "20.1.0") == Ok(True)

    def test_missing_tag(self) -> None:
        console = MockConsole()
        result = TagChecker(MockHttpClient(), console).exists("renovate/node", "20.1.0")

        assert result == Ok(False)
        assert not console.has_warning()

    def test_optimistic_mode_treats_failure_as_missing(self) -> None:
        http = MockHttpClient()
        http.set_json(_URL, HttpError(url=_URL, status=0, message="Connection refused"))
        console = MockConsole()

        result = TagChecker(http, console, mode="optimistic").exists("renovate/node", "20.1.0")

        assert result == Ok(False)
        assert console.has_warning()
        assert console.find("renovate/node:20.1.0")

    def test_strict_mode_returns_error(self) -> None:
        http = MockHttpClient()
        http.set_json(_URL, HttpError(url=_URL, status=500, message="Internal Server Error"))

        result = TagChecker(http, MockConsole(), mode="strict").exists("renovate/node", "20.1.0")

        assert isinstance(result, Err)
        assert result.error.version == "20.1.0"
        assert "500" in result.error.message

    def test_strict_mode_still_accepts_not_found(self) -> None:
        checker = TagChecker(MockHttpClient(), MockConsole(), mode="strict")
        assert checker.mode == "strict"
        assert checker.exists("renovate/node", "20.1.0") == Ok(False)
