"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- format_response, print_code, and print_table in each format
- Output file redirection
- Global instance management
"""

from __future__ import annotations

import json
import logging

import pytest

from reqport import output as output_module
from reqport.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("reqport.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("reqport.output._is_tty", lambda: True)


@pytest.fixture()
def plain(non_tty) -> OutputManager:
    return OutputManager(format=OutputFormat.PLAIN, no_color=True)


# ------------------------------------------------------------------ #
# Format resolution and colour
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_no_color(self, tty):
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, non_tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# Streams, quiet, verbose
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    def test_print_data_goes_to_stdout(self, capfd, plain):
        plain.print_data("hello world")
        captured = capfd.readouterr()
        assert captured.out == "hello world\n"
        assert captured.err == ""

    @pytest.mark.parametrize(
        ("method", "expected"),
        [
            ("info", "note"),
            ("success", "note"),
            ("warning", "Warning: note"),
            ("error", "Error: note"),
        ],
    )
    def test_diagnostics_go_to_stderr(self, capfd, plain, method, expected):
        getattr(plain, method)("note")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == f"{expected}\n"

    def test_markup_in_messages_is_not_interpreted(self, capfd, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.PLAIN)
        mgr.error("value [type=missing] [/bold]")
        assert "[type=missing] [/bold]" in capfd.readouterr().err


class TestQuietAndVerbose:
    def test_quiet_suppresses_info_and_success(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("info")
        mgr.success("done")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_warnings_errors_and_data(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.warning("careful")
        mgr.error("broken")
        mgr.print_data("data")
        captured = capfd.readouterr()
        assert "careful" in captured.err
        assert "broken" in captured.err
        assert captured.out == "data\n"

    def test_debug_hidden_by_default(self, capfd, plain):
        plain.debug("hidden")
        assert capfd.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.debug("visible")
        assert capfd.readouterr().err == "[debug] visible\n"

    def test_log_handler_writes_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        logger = logging.getLogger("reqport.test_output")
        handler = mgr.log_handler()
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        try:
            logger.debug("parsed %d tokens", 3)
        finally:
            logger.removeHandler(handler)
        captured = capfd.readouterr()
        assert "parsed 3 tokens" in captured.err
        assert captured.out == ""


# ------------------------------------------------------------------ #
# Data rendering
# ------------------------------------------------------------------ #


class TestFormatResponse:
    def test_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_response({"a": [1, 2]})
        assert json.loads(capfd.readouterr().out) == {"a": [1, 2]}

    def test_plain_dict(self, capfd, plain):
        plain.format_response({"name": "x", "tags": ["a"]})
        assert capfd.readouterr().out == 'name\tx\ntags\t["a"]\n'

    def test_plain_list(self, capfd, plain):
        plain.format_response([{"a": 1}, "b"])
        assert capfd.readouterr().out == '{"a": 1}\nb\n'

    def test_output_file(self, capfd, tmp_path, non_tty):
        target = tmp_path / "out.json"
        mgr = OutputManager(format=OutputFormat.PLAIN, output_file=str(target))
        mgr.format_response({"a": 1})
        assert json.loads(target.read_text()) == {"a": 1}
        assert capfd.readouterr().out == ""


class TestPrintCode:
    def test_plain_is_verbatim(self, capfd, plain):
        plain.print_code("curl 'https://x'", "bash")
        assert capfd.readouterr().out == "curl 'https://x'\n"

    def test_json_wraps_code(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_code("print(1)", "python")
        assert json.loads(capfd.readouterr().out) == {"language": "python", "code": "print(1)"}

    def test_rich_renders(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_code("print(1)", "python")
        assert "print" in capfd.readouterr().out


class TestPrintTable:
    def test_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(["a", "b"], [["1", "2"]])
        assert json.loads(capfd.readouterr().out) == [{"a": "1", "b": "2"}]

    def test_plain(self, capfd, plain):
        plain.print_table(["a", "b"], [["1", "2"], ["3", "4"]])
        assert capfd.readouterr().out == "a\tb\n1\t2\n3\t4\n"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


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

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("out")
        output_module.warning("err")
        captured = capfd.readouterr()
        assert captured.out == "out\n"
        assert captured.err == "Warning: err\n"
