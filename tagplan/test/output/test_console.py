"""Tests for tagplan.output.console module."""

from __future__ import annotations

import pytest

from tagplan.output.console import (
    FIELD_WIDTH,
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
    format_field,
)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.HEADER) == "header"

    def test_all_styles_exist(self) -> None:
        expected = {"DEFAULT", "SUCCESS", "ERROR", "WARNING", "INFO", "DIM", "HEADER"}
        assert {s.name for s in Style} == expected


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_prefixed_messages(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("broken")
        console.warning("careful")
        console.info("fyi")
        assert console.messages == ["OK done", "error: broken", "warning: careful", "info: fyi"]
        assert console.has_error()
        assert console.has_warning()

    def test_field_is_aligned(self) -> None:
        console = MockConsole()
        console.field("Flow", "default")
        assert console.messages == [format_field("Flow", "default")]
        assert console.messages[0] == "  " + "Flow".ljust(FIELD_WIDTH) + ": default"

    def test_header_and_newline(self) -> None:
        console = MockConsole()
        console.header("Plan")
        console.newline()
        assert console.outputs[0].style == Style.HEADER
        assert console.outputs[1].message == ""

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.print("alpha")
        console.print("beta")
        assert [o.message for o in console.find("et")] == ["beta"]
        assert console.text == "alpha\nbeta"
        assert not console.has_error()


class TestProtocol:
    def test_implementations_satisfy_protocol(self) -> None:
        consoles: list[ConsoleProtocol] = [MockConsole(), RichConsole()]
        assert len(consoles) == 2


def test_rich_console_does_not_interpret_markup(capsys: pytest.CaptureFixture[str]) -> None:
    console = RichConsole(stderr=True)
    console.field("Branch", "feature/[wip]")
    console.warning("[bold]literal[/bold]")
    err = capsys.readouterr().err
    assert "feature/[wip]" in err
    assert "[bold]literal[/bold]" in err
