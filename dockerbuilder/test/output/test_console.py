"""Tests for dockerbuilder.output.console module."""

from __future__ import annotations

import pytest

from dockerbuilder.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.STREAM_ERR) == "stream_err"


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs == [OutputRecord("hello", Style.DEFAULT)]

    def test_shorthands_prefix_messages(self) -> None:
        console = MockConsole()
        console.success("built")
        console.error("failed")
        console.warning("careful")
        console.info("note")
        assert console.messages == ["OK built", "error: failed", "warning: careful", "info: note"]
        assert console.has_error()
        assert console.has_warning()

    def test_stream_records_origin(self) -> None:
        console = MockConsole()
        console.stream("Step 1/4")
        console.stream("warning: cache miss", stderr=True)
        assert console.count(Style.STREAM) == 1
        assert console.count(Style.STREAM_ERR) == 1

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.print("Build list: 1.0.0")
        console.newline()
        assert len(console.find("Build list")) == 1
        assert console.text == "Build list: 1.0.0\n"


class TestRichConsole:
    def test_implements_protocol(self) -> None:
        console: ConsoleProtocol = RichConsole()
        assert callable(console.stream)

    def test_stream_does_not_parse_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().stream("[internal] load build definition")
        assert "[internal] load build definition" in capsys.readouterr().out

    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().error("boom")
        captured = capsys.readouterr()
        assert "boom" in captured.err
        assert "boom" not in captured.out
