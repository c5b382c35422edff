"""Tests for zrelease.output.console module."""

from __future__ import annotations

import pytest

from zrelease.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestStyle:
    """Test Style enum."""

    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"

    def test_all_styles_exist(self) -> None:
        expected = {"DEFAULT", "SUCCESS", "ERROR", "WARNING", "INFO", "DIM", "BOLD", "HEADER"}
        assert {s.name for s in Style} == expected


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_prefixes(self) -> None:
        console = MockConsole()
        console.success("provision")
        console.error("lint failed")
        console.warning("careful")
        console.info("dry run")
        assert console.messages == [
            "OK provision",
            "error: lint failed",
            "warning: careful",
            "info: dry run",
        ]
        assert console.has_error()
        assert console.has_success()

    def test_command_is_shell_quoted(self) -> None:
        console = MockConsole()
        console.command(["gh", "release", "create", "9.0", "--title", "Zulip Server 9.0"])
        assert console.commands == ["gh release create 9.0 --title 'Zulip Server 9.0'"]
        assert console.outputs[0].style == Style.DIM

    def test_find_and_clear(self) -> None:
        console = MockConsole()
        console.header("Quality gates")
        console.newline()
        assert len(console.find("gates")) == 1
        console.clear()
        assert console.outputs == []

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.print("ok")


class TestRichConsole:
    def test_markup_in_messages_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("- Fixed [bold] rendering in [topic] links.")
        console.success("tagged [9.0]")

        out = capsys.readouterr().out
        assert "[bold]" in out
        assert "[topic]" in out
        assert "OK tagged [9.0]" in out

    def test_error_prefix(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().error("gh auth required")
        assert "error: gh auth required" in capsys.readouterr().out

    def test_stderr_console(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(stderr=True).warning("countdown")
        captured = capsys.readouterr()
        assert "warning: countdown" in captured.err
        assert captured.out == ""
