"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- format_response in JSON and plain formats
- print_table, print_code and print_tree in every mode
- Output file redirection
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from clearapi import output as output_module
from clearapi.models import SchemaTreeNode
from clearapi.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("clearapi.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("clearapi.output._is_tty", lambda: True)


@pytest.fixture()
def book_tree() -> SchemaTreeNode:
    """A small hand-built tree: Book with a nested, circular and read-only row."""
    return SchemaTreeNode(
        name="Book",
        type_label="Book",
        ref_name="Book",
        description="A book",
        children=[
            SchemaTreeNode(name="id", type_label="integer", read_only=True),
            SchemaTreeNode(
                name="author",
                type_label="Author",
                required=True,
                children=[SchemaTreeNode(name="name", type_label="string", required=True)],
            ),
            SchemaTreeNode(name="related", type_label="array<Book>", cycle=True),
        ],
    )


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

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        assert mgr.format == OutputFormat.JSON


class TestColorDisabling:
    """Test that NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_disables_color(self, monkeypatch):
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

    def test_no_color_flag_overrides(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Test that data goes to stdout and diagnostics go to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("hello world")
        captured = capfd.readouterr()
        assert "hello world" in captured.out
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "error", "warning", "success", "suggest"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("Run: clearapi load ./openapi.json")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Run: clearapi load ./openapi.json" in captured.err

    def test_debug_goes_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.debug("OpenAPI version: 3.0.3")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "[debug] OpenAPI version: 3.0.3" in captured.err

    def test_prefixes_without_color(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.warning("careful")
        mgr.error("broken")
        mgr.suggest("next")
        err = capfd.readouterr().err
        assert "Warning: careful" in err
        assert "Error: broken" in err
        assert "→ next" in err


class TestQuietAndVerbose:
    """--quiet suppresses info/success/suggest; --verbose enables debug."""

    @pytest.mark.parametrize("method", ["info", "success", "suggest"])
    def test_quiet_suppresses(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        getattr(mgr, method)("should not appear")
        assert capfd.readouterr().err == ""

    @pytest.mark.parametrize("method", ["warning", "error"])
    def test_quiet_keeps_problems(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        getattr(mgr, method)("important")
        assert "important" in capfd.readouterr().err

    def test_quiet_does_not_suppress_stdout_data(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.print_data("important data")
        assert "important data" in capfd.readouterr().out

    def test_debug_hidden_by_default(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.debug("should not appear")
        assert capfd.readouterr().err == ""

    def test_properties(self, non_tty):
        mgr = OutputManager(quiet=True, verbose=True)
        assert mgr.is_quiet is True
        assert mgr.is_verbose is True


# ------------------------------------------------------------------ #
# format_response
# ------------------------------------------------------------------ #


class TestFormatResponse:

    def test_dict_as_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_response({"title": "Bookstore API", "operations": 7})
        assert json.loads(capfd.readouterr().out) == {"title": "Bookstore API", "operations": 7}

    def test_json_string_reindented(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_response('{"a":1}')
        assert capfd.readouterr().out == '{\n  "a": 1\n}\n'

    def test_dict_as_key_value_plain(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response({"title": "Bookstore API"})
        assert capfd.readouterr().out == "title\tBookstore API\n"

    def test_list_of_dicts_plain(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response([{"a": 1, "b": 2}, {"a": 3, "b": 4}])
        assert capfd.readouterr().out == "1\t2\n3\t4\n"

    def test_rich_dict_produces_output(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.format_response({"key": "value"})
        assert "key" in capfd.readouterr().out


# ------------------------------------------------------------------ #
# Tables, code blocks and trees
# ------------------------------------------------------------------ #


class TestPrintTable:
    """Test print_table in all three output modes."""

    def test_table_json_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(["Method", "Path"], [["GET", "/books"], ["POST", "/books"]])
        parsed = json.loads(capfd.readouterr().out)
        assert parsed == [
            {"Method": "GET", "Path": "/books"},
            {"Method": "POST", "Path": "/books"},
        ]

    def test_table_plain_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(["Method", "Path"], [["GET", "/books"]], title="Books")
        lines = capfd.readouterr().out.strip().split("\n")
        assert lines == ["Method\tPath", "GET\t/books"]

    def test_table_rich_mode_escapes_markup(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_table(["Type"], [["array[Book]"]], title="Schemas")
        out = capfd.readouterr().out
        assert "array[Book]" in out
        assert "Schemas" in out


class TestPrintCode:

    def test_plain_writes_text_unchanged(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_code('curl -X GET "/books"', lexer="bash")
        assert capfd.readouterr().out == 'curl -X GET "/books"\n'

    def test_json_mode_writes_text_unchanged(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_code('{\n  "a": 1\n}')
        assert capfd.readouterr().out == '{\n  "a": 1\n}\n'

    def test_rich_mode_highlights(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_code('{"title": "Dune"}')
        assert "Dune" in capfd.readouterr().out

    def test_output_file_overwritten(self, tmp_path, capfd, non_tty):
        outfile = tmp_path / "API.md"
        outfile.write_text("stale", encoding="utf-8")
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True, output_file=str(outfile))
        mgr.print_code("# Bookstore API\n", lexer="markdown")
        assert capfd.readouterr().out == ""
        assert outfile.read_text(encoding="utf-8") == "# Bookstore API\n"


class TestPrintTree:

    def test_plain_indented(self, capfd, non_tty, book_tree):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_tree(book_tree)
        assert capfd.readouterr().out.splitlines() == [
            "Book (Book) - A book",
            "  id (integer) [read-only]",
            "  author (Author) [required]",
            "    name (string) [required]",
            "  related (array<Book>) [circular]",
        ]

    def test_json_nested(self, capfd, non_tty, book_tree):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_tree(book_tree)
        data = json.loads(capfd.readouterr().out)
        assert data["name"] == "Book"
        assert data["children"][1]["children"][0]["required"] is True
        assert data["children"][2]["cycle"] is True

    def test_rich_contains_rows(self, capfd, non_tty, book_tree):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_tree(book_tree)
        out = capfd.readouterr().out
        assert "author" in out
        assert "[circular]" in out


# ------------------------------------------------------------------ #
# Output file redirection
# ------------------------------------------------------------------ #


class TestOutputFile:
    """Test -o / --output file redirection."""

    def test_format_response_writes_to_file(self, tmp_path, capfd, non_tty):
        outfile = str(tmp_path / "out.json")
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True, output_file=outfile)
        mgr.format_response({"key": "value"})
        assert capfd.readouterr().out == ""
        with open(outfile) as f:
            assert json.loads(f.read()) == {"key": "value"}

    def test_print_data_appends_to_file(self, tmp_path, capfd, non_tty):
        outfile = str(tmp_path / "out.txt")
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, output_file=outfile)
        mgr.print_data("line one")
        mgr.print_data("line two")
        assert capfd.readouterr().out == ""
        with open(outfile) as f:
            assert f.read() == "line one\nline two\n"


# ------------------------------------------------------------------ #
# Global instance management
# ------------------------------------------------------------------ #


class TestGlobalInstance:

    def test_get_output_creates_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_output_overrides(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr

    def test_reset_output_clears(self):
        set_output(OutputManager(format=OutputFormat.JSON))
        reset_output()
        assert output_module._output is None

    def test_convenience_functions_use_global(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_code("body")
        output_module.info("note")
        captured = capfd.readouterr()
        assert captured.out == "body\n"
        assert "note" in captured.err
