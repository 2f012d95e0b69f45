"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- emit_data to stdout and to a file
- print_table in all three modes
- Global instance management
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from structdoc import output as output_module
from structdoc.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("structdoc.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("structdoc.output._is_tty", lambda: True)


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_no_color_forces_plain_on_tty(self, tty):
        assert OutputManager(format=OutputFormat.AUTO, no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_kept(self, non_tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_dumb_term(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


class TestEmitData:
    def test_json_goes_to_stdout(self, capsys):
        OutputManager(format=OutputFormat.JSON).emit_data({"title": "Users API"})
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"title": "Users API"}
        assert captured.err == ""

    def test_plain_is_still_json(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).emit_data({"sections": []})
        assert json.loads(capsys.readouterr().out) == {"sections": []}

    def test_output_file(self, tmp_path: Path, capsys):
        target = tmp_path / "docs.json"
        OutputManager(format=OutputFormat.PLAIN).emit_data({"a": 1}, target)
        assert json.loads(target.read_text(encoding="utf-8")) == {"a": 1}
        assert capsys.readouterr().out == ""


class TestPrintTable:
    def test_plain(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).print_table(["A", "B"], [["1", "2"]])
        assert capsys.readouterr().out == "A\tB\n1\t2\n"

    def test_json(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_table(["A", "B"], [["1", "2"]])
        assert json.loads(capsys.readouterr().out) == [{"A": "1", "B": "2"}]

    def test_rich(self, capsys, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        OutputManager(format=OutputFormat.RICH).print_table(["Section"], [["Users"]], title="T")
        out = capsys.readouterr().out
        assert "Section" in out
        assert "Users" in out


class TestDiagnostics:
    def test_messages_go_to_stderr(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.info("loading")
        mgr.warning("careful")
        mgr.error("broken")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "loading" in captured.err
        assert "Warning: careful" in captured.err
        assert "Error: broken" in captured.err

    def test_quiet_suppresses_info_not_errors(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden too")
        mgr.error("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_debug_only_when_verbose(self, capsys):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("quiet")
        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("loud")
        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "[debug] loud" in err


class TestGlobalInstance:
    def test_lazy_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_and_reset(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_module_helpers_delegate(self, capsys):
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        output_module.emit_data([1, 2])
        output_module.warning("w")
        captured = capsys.readouterr()
        assert json.loads(captured.out) == [1, 2]
        assert "Warning: w" in captured.err
