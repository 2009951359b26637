"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (examples, command lines, tables, trees).
  This is what downstream tools pipe and parse.
* **stderr** -- all diagnostics (status, warnings, errors, suggestions,
  debug traces). Never contaminates the data stream.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding format preferences,
   Rich consoles, and quiet/verbose flags. Created once in
   :func:`~clearapi.app.main_callback` and installed via :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``
   instance so callers do not need to pass the manager around.

There is no separate logging setup: :func:`debug` (shown with ``--verbose``)
is the diagnostic trace, and crashes are written to a log file by
:func:`~clearapi.app.main`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from clearapi.models import SchemaTreeNode


class OutputFormat(str, Enum):
    """Enumeration of supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise. Callers can force a specific
    format via the ``--json`` or ``--plain`` CLI flags.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream with appropriate formatting.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
        output_file: If set, redirect primary data output to this file
            path instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file

        # AUTO picks RICH for an interactive TTY, PLAIN otherwise
        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Format and output structured data to stdout.

        Dispatches to the appropriate renderer (JSON, plain, or Rich) based
        on the resolved :attr:`format`. When an ``output_file`` was
        configured, data is written there instead of stdout.

        Args:
            data: Payload -- typically a dict, list, or JSON string.
        """
        if self._output_file:
            self._write_to_file(data)
            return

        if self._format == OutputFormat.JSON:
            self._print_json(data)
        elif self._format == OutputFormat.PLAIN:
            self._print_plain(data)
        else:
            self._print_rich(data)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout (or append it to the configured output file).

        Args:
            text: The string to write. A trailing newline is appended if
                missing.
        """
        if self._output_file:
            with open(self._output_file, "a", encoding="utf-8") as f:
                f.write(text)
                if not text.endswith("\n"):
                    f.write("\n")
        else:
            print(text, file=sys.stdout, flush=True)

    def print_code(self, text: str, lexer: str = "json") -> None:
        """Print a copyable block of source text (JSON, shell, Markdown).

        Rich mode highlights it with :class:`~rich.syntax.Syntax`; every
        other mode writes the text unchanged so it can be piped or pasted.
        With an ``output_file`` the file is overwritten with the text.

        Args:
            text: The text to print.
            lexer: Pygments lexer name used for highlighting.
        """
        if self._output_file:
            self._write_to_file(text)
        elif self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(text, lexer, theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print tabular data to stdout in the active format.

        * **Rich mode** -- styled :class:`~rich.table.Table` with column
          headers.
        * **JSON mode** -- array of objects keyed by header names.
        * **Plain mode** -- tab-separated values, one row per line.

        Args:
            headers: Column header strings.
            rows: List of rows, where each row is a list of cell strings.
            title: Optional table title (Rich mode only).
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))

        elif self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))

        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._stdout.print(table)

    def print_tree(self, node: SchemaTreeNode) -> None:
        """Print an expanded schema tree.

        * **Rich mode** -- a :class:`~rich.tree.Tree` with required markers.
        * **JSON mode** -- the node as nested JSON.
        * **Plain mode** -- one row per property, indented two spaces per
          level.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(node.model_dump(mode="json"), indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            self.print_data(_tree_label(node, markup=False))
            for line in _plain_tree_lines(node, 1):
                self.print_data(line)
        else:
            tree = Tree(_tree_label(node, markup=True))
            _add_rich_children(tree, node)
            self._stdout.print(tree)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(message)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``."""
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def suggest(self, message: str) -> None:
        """Print a dimmed next-step suggestion to stderr. Suppressed by ``--quiet``.

        Args:
            message: The suggestion text (prefixed with an arrow on output).
        """
        if not self._quiet:
            formatted = f"→ {message}"
            if self._no_color:
                print(formatted, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]{formatted}[/dim]")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active.

        Args:
            message: The debug text (prefixed with ``[debug]`` on output).
        """
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]\\[debug] {escape(message)}[/dim]")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print_json(self, data: Any) -> None:
        """Print data as raw JSON to stdout."""
        if isinstance(data, str):
            try:
                parsed = json.loads(data)
                self.print_data(json.dumps(parsed, indent=2, ensure_ascii=False, default=str))
            except (json.JSONDecodeError, TypeError):
                self.print_data(data)
        else:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def _print_plain(self, data: Any) -> None:
        """Print data as plain text to stdout."""
        if isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self.print_data("\t".join(str(v) for v in item.values()))
                else:
                    self.print_data(str(item))
        else:
            self.print_data(str(data))

    def _print_rich(self, data: Any) -> None:
        """Print data with Rich formatting to stdout."""
        if isinstance(data, (dict, list)):
            json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))
        elif isinstance(data, str):
            try:
                parsed = json.loads(data)
                json_str = json.dumps(parsed, indent=2, ensure_ascii=False, default=str)
                self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))
            except (json.JSONDecodeError, TypeError):
                self._stdout.print(escape(data))
        else:
            self._stdout.print(str(data))

    def _write_to_file(self, data: Any) -> None:
        """Write data to the configured output file."""
        assert self._output_file is not None
        if isinstance(data, (dict, list)):
            content = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        elif isinstance(data, str):
            content = data
        else:
            content = str(data)

        with open(self._output_file, "w", encoding="utf-8") as f:
            f.write(content)
            if not content.endswith("\n"):
                f.write("\n")


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def _tree_label(node: SchemaTreeNode, markup: bool) -> str:
    """One-line label for a tree row: name, type, and markers."""
    name = escape(node.name) if markup else node.name
    type_label = escape(node.type_label) if markup else node.type_label
    label = f"[bold]{name}[/bold] [cyan]{type_label}[/cyan]" if markup else f"{name} ({type_label})"

    markers = []
    if node.required:
        markers.append("required")
    if node.read_only:
        markers.append("read-only")
    if node.write_only:
        markers.append("write-only")
    if node.cycle:
        markers.append("circular")
    if node.truncated:
        markers.append("...")
    if markers:
        text = ", ".join(markers)
        label += f" [red]\\[{text}][/red]" if markup else f" [{text}]"

    if node.description:
        description = escape(node.description) if markup else node.description
        label += f" [dim]{description}[/dim]" if markup else f" - {description}"
    return label


def _plain_tree_lines(node: SchemaTreeNode, level: int) -> list[str]:
    lines: list[str] = []
    for child in node.children:
        lines.append("  " * level + _tree_label(child, markup=False))
        lines.extend(_plain_tree_lines(child, level + 1))
    return lines


def _add_rich_children(tree: Tree, node: SchemaTreeNode) -> None:
    for child in node.children:
        branch = tree.add(_tree_label(child, markup=True))
        _add_rich_children(branch, child)


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    ``OutputManager`` with ``AUTO`` format is created lazily.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance.

    Called once during CLI startup from :func:`~clearapi.app.main_callback`.
    """
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def format_response(data: Any) -> None:
    """Format and output structured data to stdout via the global :class:`OutputManager`."""
    get_output().format_response(data)


def print_data(text: str) -> None:
    """Print raw data to stdout via the global OutputManager."""
    get_output().print_data(text)


def print_code(text: str, lexer: str = "json") -> None:
    """Print a copyable text block via the global OutputManager."""
    get_output().print_code(text, lexer)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    """Print tabular data to stdout via the global :class:`OutputManager`.

    Args:
        headers: Column header strings.
        rows: Row data as lists of cell strings.
        title: Optional table title (Rich mode only).
    """
    get_output().print_table(headers, rows, title)


def print_tree(node: SchemaTreeNode) -> None:
    """Print a schema tree via the global OutputManager."""
    get_output().print_tree(node)


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)


def suggest(message: str) -> None:
    """Print next-step suggestion to stderr via the global OutputManager."""
    get_output().suggest(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)
