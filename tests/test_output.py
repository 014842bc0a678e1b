"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet mode suppression rules
- Verbose mode debug output
- Raw declaration output
- print_table in all three modes
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from webext_types.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)
from webext_types import output as output_module


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("webext_types.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("webext_types.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """Test that AUTO format resolves correctly based on environment."""

    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        assert mgr.format == OutputFormat.JSON


class TestColorDisabling:
    """Test that NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Declarations go to stdout; diagnostics go to stderr."""

    def test_print_data_is_verbatim(self, capsys, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("export interface RunOptions {\n}\n")
        captured = capsys.readouterr()
        assert captured.out == "export interface RunOptions {\n}\n"
        assert captured.err == ""

    def test_print_data_adds_missing_newline(self, capsys, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("x")
        assert capsys.readouterr().out == "x\n"

    def test_print_data_never_interprets_markup(self, capsys, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH)
        mgr.print_data("('a' | 'b')[] [bold]x[/bold]")
        assert capsys.readouterr().out == "('a' | 'b')[] [bold]x[/bold]\n"

    @pytest.mark.parametrize("method", ["info", "error", "warning", "success", "suggest"])
    def test_diagnostics_go_to_stderr(self, capsys, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("diagnostic text")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "diagnostic text" in captured.err

    def test_error_with_brackets_is_escaped(self, capsys, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.PLAIN)
        mgr.error("Unresolved identifier in [red]schema[/red]")
        assert "[red]schema[/red]" in capsys.readouterr().err


# ------------------------------------------------------------------ #
# Quiet / verbose
# ------------------------------------------------------------------ #


class TestQuietAndVerbose:
    def test_quiet_suppresses_info(self, capsys, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden")
        mgr.suggest("hidden")
        assert capsys.readouterr().err == ""

    def test_quiet_keeps_errors_and_warnings(self, capsys, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.error("shown error")
        mgr.warning("shown warning")
        err = capsys.readouterr().err
        assert "Error: shown error" in err
        assert "Warning: shown warning" in err

    def test_debug_only_when_verbose(self, capsys, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("nope")
        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("yes")
        err = capsys.readouterr().err
        assert "nope" not in err
        assert "[debug] yes" in err

    def test_progress_hidden_when_not_tty(self, capsys, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).progress("Fetching")
        assert capsys.readouterr().err == ""


# ------------------------------------------------------------------ #
# Tables
# ------------------------------------------------------------------ #


class TestPrintTable:
    HEADERS = ["Command", "Option", "Type"]
    ROWS = [["run", "target", "string[] | undefined"], ["sign", "api-key", "string"]]

    def test_json(self, capsys, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(self.HEADERS, self.ROWS)
        data = json.loads(capsys.readouterr().out)
        assert data == [
            {"Command": "run", "Option": "target", "Type": "string[] | undefined"},
            {"Command": "sign", "Option": "api-key", "Type": "string"},
        ]

    def test_plain(self, capsys, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_table(self.HEADERS, self.ROWS)
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Command\tOption\tType"
        assert lines[1] == "run\ttarget\tstring[] | undefined"

    def test_rich(self, capsys, non_tty):
        OutputManager(format=OutputFormat.RICH).print_table(
            self.HEADERS, self.ROWS, title="Options"
        )
        out = capsys.readouterr().out
        assert "api-key" in out
        assert "Options" in out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_lazy_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_and_reset(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_convenience_functions_delegate(self, capsys, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("data")
        output_module.warning("warn")
        captured = capsys.readouterr()
        assert captured.out == "data\n"
        assert "warn" in captured.err
