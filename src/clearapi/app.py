"""Typer application and CLI entry point for clearapi.

This module wires together the top-level Typer application and registers the
built-in commands: ``load``, ``docs``, ``config``, the browsing commands
(``info``, ``endpoints``, ``show``, ``schemas``, ``schema``) and the
generators (``example``, ``curl``, ``render``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`clearapi.config`: Global configuration and document resolution.
    :mod:`clearapi.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from clearapi import __version__
from clearapi.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="clearapi",
    help="Browse OpenAPI 3 documents: grouped endpoints, schema trees, examples and curl.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"clearapi {__version__}")
        raise typer.Exit()


def _configured_format() -> Any:  # noqa: ANN401
    """Output format from the global config, ``AUTO`` when unset or invalid.

    A broken config file is reported by the commands that read it.
    """
    from clearapi.config import load_global_config
    from clearapi.exceptions import ConfigError
    from clearapi.output import OutputFormat

    try:
        return OutputFormat(load_global_config().output.format)
    except (ConfigError, ValueError):
        return OutputFormat.AUTO


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write generated output to this file."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~clearapi.output.OutputManager` from
    CLI flags (falling back to ``output.format`` from the global config)
    and stores shared options in the Typer context so that sub-commands can
    read them via ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        force: Skip interactive confirmations.
        output_file: Redirect primary data output to a file path.
    """
    from clearapi.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


# ------------------------------------------------------------------ #
# Built-in commands
# ------------------------------------------------------------------ #

from clearapi.commands.config import config_app  # noqa: E402
from clearapi.commands.docs import docs_app  # noqa: E402
from clearapi.commands.generate import curl_command, example_command, render_command  # noqa: E402
from clearapi.commands.inspect import (  # noqa: E402
    endpoints_command,
    info_command,
    schema_command,
    schemas_command,
    show_command,
)
from clearapi.commands.load import load_command  # noqa: E402

app.command("load")(load_command)
app.add_typer(docs_app, name="docs", help="Manage stored documents.")
app.add_typer(config_app, name="config", help="Configuration management.")
app.command("info")(info_command)
app.command("endpoints")(endpoints_command)
app.command("show")(show_command)
app.command("schemas")(schemas_command)
app.command("schema")(schema_command)
app.command("example")(example_command)
app.command("curl")(curl_command)
app.command("render")(render_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from clearapi.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        encoding="utf-8",
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``clearapi`` console script.

    Unhandled :class:`~clearapi.exceptions.ClearApiError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from clearapi.exceptions import ClearApiError
        from clearapi.output import error

        if isinstance(exc, ClearApiError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
