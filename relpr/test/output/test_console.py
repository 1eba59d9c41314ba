"""Tests for relpr.output.console module."""

from __future__ import annotations

import pytest

from relpr.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"

    def test_all_styles_exist(self) -> None:
        expected = {"DEFAULT", "SUCCESS", "ERROR", "WARNING", "INFO", "DIM", "HEADER"}
        assert {s.name for s in Style} == expected


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs == [OutputRecord("hello", Style.DEFAULT)]

    def test_prefixes(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("broken")
        console.warning("careful")
        console.info("fyi")
        assert console.messages == ["OK done", "error: broken", "warning: careful", "info: fyi"]

    def test_has_error_and_warning(self) -> None:
        console = MockConsole()
        assert console.has_error() is False
        console.warning("drift")
        assert console.has_warning() is True
        assert console.has_error() is False
        console.error("boom")
        assert console.has_error() is True

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.print("git push --force", Style.DIM)
        console.header("Publishing")
        assert [o.style for o in console.find("git push")] == [Style.DIM]
        assert console.text == "git push --force\nPublishing"

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.info("ok")


class TestRichConsole:
    def test_does_not_interpret_markup_in_messages(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("[bold]literal[/bold]")
        console.warning("draft [1] drifted")

        out = capsys.readouterr().out
        assert "[bold]literal[/bold]" in out
        assert "warning:" in out
        assert "draft [1] drifted" in out
