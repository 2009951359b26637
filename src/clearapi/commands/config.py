"""Config commands -- view and modify global configuration.

Provides the ``clearapi config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~clearapi.models.GlobalConfig`): the active document, the default
output format and the schema tree depth.
"""

from __future__ import annotations

import typer

from clearapi.exceptions import ClearApiError
from clearapi.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        clearapi config show
        clearapi config show --json
    """
    from clearapi.config import get_config_dir, load_global_config

    try:
        config = load_global_config()
    except ClearApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'tree.max_depth')."
    ),
    value: str = typer.Argument(help="Value to set ('none' clears optional keys)."),
) -> None:
    """Set a configuration value.

    The value is coerced to match the existing field's type (bool, int, or
    str) and validated before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        clearapi config set default_document bookstore
        clearapi config set output.format json
        clearapi config set tree.max_depth 4
    """
    from clearapi.config import load_global_config, save_global_config, set_config_value
    from clearapi.exit_codes import EXIT_INVALID_USAGE

    try:
        config = load_global_config()
    except ClearApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    try:
        new_config = set_config_value(config, key, value)
    except ClearApiError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        clearapi config reset
        clearapi --force config reset
    """
    from clearapi.config import save_global_config
    from clearapi.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
