from __future__ import annotations

import json
from typing import Iterator

import pytest
from rich.console import Console

from importmapper.utils import console as console_module
from importmapper.utils.console import (
    colorize_update_type,
    get_raw_console,
    print_error,
    print_json,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)


@pytest.fixture
def plain_console(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Fresh colorless console writing to the captured stdout."""
    monkeypatch.setenv("NO_COLOR", "1")
    reconfigure_console()
    yield
    reconfigure_console()


@pytest.mark.unit
class TestConsoleLifecycle:
    """Tests for console creation and reconfiguration."""

    def test_console_is_cached(self, plain_console) -> None:
        assert get_raw_console() is get_raw_console()
        assert isinstance(get_raw_console(), Console)

    def test_reconfigure_drops_cached_console(self, plain_console) -> None:
        first = get_raw_console()

        reconfigure_console()

        assert get_raw_console() is not first

    @pytest.mark.parametrize("variable", ["NO_COLOR", "CI"])
    def test_color_disabled_by_environment(self, monkeypatch: pytest.MonkeyPatch, variable: str) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)
        monkeypatch.setenv(variable, "1")

        assert console_module._should_use_color() is False


@pytest.mark.unit
class TestMessages:
    """Tests for the status message helpers."""

    @pytest.mark.parametrize(
        "func,prefix",
        [(print_success, "[OK]"), (print_error, "[ERROR]"), (print_warning, "[WARNING]")],
    )
    def test_prefixes(self, plain_console, capsys: pytest.CaptureFixture, func, prefix: str) -> None:
        func("lodash added")

        assert capsys.readouterr().out.strip() == f"{prefix} lodash added"

    def test_custom_prefix(self, plain_console, capsys: pytest.CaptureFixture) -> None:
        print_success("done", prefix=">>")

        assert capsys.readouterr().out.strip() == ">> done"


@pytest.mark.unit
class TestStructuredOutput:
    """Tests for print_table and print_json."""

    def test_table(self, plain_console, capsys: pytest.CaptureFixture) -> None:
        print_table(
            [{"Package": "lodash", "Current": "4.17.21"}],
            title="Updated Packages",
            column_styles={"Package": {"no_wrap": True}},
        )

        out = capsys.readouterr().out
        assert "Updated Packages" in out
        assert "lodash" in out
        assert "4.17.21" in out

    def test_table_header_order(self, plain_console, capsys: pytest.CaptureFixture) -> None:
        print_table([{"a": 1, "b": 2}], headers=["b", "a"])

        header = next(line for line in capsys.readouterr().out.splitlines() if "a" in line and "b" in line)
        assert header.index("b") < header.index("a")

    def test_empty_table_prints_nothing(self, plain_console, capsys: pytest.CaptureFixture) -> None:
        print_table([])

        assert capsys.readouterr().out == ""

    def test_json(self, plain_console, capsys: pytest.CaptureFixture) -> None:
        payload = {"imports": {"app": "/assets/app.js"}}

        print_json(json.dumps(payload))

        assert json.loads(capsys.readouterr().out) == payload


@pytest.mark.unit
@pytest.mark.parametrize(
    "update_type,expected",
    [
        ("major", "[red]major[/red]"),
        ("minor", "[yellow]minor[/yellow]"),
        ("patch", "[green]patch[/green]"),
        ("new", "[cyan]new[/cyan]"),
        ("same", "same"),
        ("unknown", "unknown"),
    ],
)
def test_colorize_update_type(update_type: str, expected: str) -> None:
    assert colorize_update_type(update_type) == expected
