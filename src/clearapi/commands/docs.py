"""Docs commands -- manage stored documents.

Provides the ``clearapi docs`` sub-command group: list stored documents,
choose the active one, remove one, or export one to a JSON file.
"""

from __future__ import annotations

import typer

from clearapi.exceptions import ClearApiError, StoreError
from clearapi.output import error, get_output, info, success, suggest


docs_app = typer.Typer(no_args_is_help=True)


@docs_app.command("list")
def docs_list() -> None:
    """List stored documents.

    The active document (from the global config) is marked with ``*``.

    Example::

        clearapi docs list
        clearapi docs list --json
    """
    from clearapi.config import load_global_config
    from clearapi.store import list_documents, load_document

    keys = list_documents()
    if not keys:
        info("No stored documents.")
        suggest("Run: clearapi load <url-or-file>")
        return

    active = load_global_config().default_document
    rows: list[list[str]] = []
    for key in keys:
        title, version = "(unreadable)", "-"
        try:
            raw = load_document(key)
        except StoreError:
            pass
        else:
            meta = raw.get("info") if isinstance(raw.get("info"), dict) else {}
            title = str(meta.get("title") or "-")
            version = str(meta.get("version") or "-")
        rows.append([key, title, version, "*" if key == active else ""])

    get_output().print_table(["Key", "Title", "Version", "Active"], rows, title="Documents")


@docs_app.command("use")
def docs_use(key: str = typer.Argument(help="Stored document key.")) -> None:
    """Make a stored document the active one.

    Example::

        clearapi docs use bookstore
    """
    from clearapi.config import load_global_config, save_global_config
    from clearapi.exceptions import NotFoundError
    from clearapi.store import document_exists

    try:
        if not document_exists(key):
            raise NotFoundError(f"Document '{key}' not found")
        config = load_global_config()
        config.default_document = key
        save_global_config(config)
    except ClearApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Active document: {key}")


@docs_app.command("remove")
def docs_remove(
    ctx: typer.Context,
    key: str = typer.Argument(help="Stored document key."),
) -> None:
    """Remove a stored document.

    Asks for confirmation unless ``--force`` is active. Removing the
    active document clears the selection.

    Example::

        clearapi docs remove bookstore
        clearapi --force docs remove bookstore
    """
    from clearapi.config import load_global_config, save_global_config
    from clearapi.store import delete_document

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm(f"Remove stored document '{key}'?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    try:
        delete_document(key)
        config = load_global_config()
        if config.default_document == key:
            config.default_document = None
            save_global_config(config)
    except ClearApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Removed document '{key}'.")


@docs_app.command("export")
def docs_export(
    key: str = typer.Argument(help="Stored document key."),
    path: str = typer.Argument(help="Destination file."),
) -> None:
    """Write a stored document to a JSON file.

    Example::

        clearapi docs export bookstore ./bookstore.json
    """
    from clearapi.store import export_document

    try:
        target = export_document(key, path)
    except ClearApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Exported '{key}' to {target}")
