"""Load command -- store an OpenAPI document for browsing.

Implements ``clearapi load``, the usual first step: it fetches a document
(URL, local file or stdin), checks its OpenAPI version, extracts it once to
make sure it is usable, stores the raw document under a key derived from
its title (or ``--name``), and makes it the active document.
"""

from __future__ import annotations

from typing import Optional

import typer

from clearapi.exceptions import ClearApiError
from clearapi.output import debug, error, info, success, suggest, warning


def load_command(
    source: str = typer.Argument(help="OpenAPI document URL or file path ('-' for stdin)."),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Storage key (derived from the title if omitted)."
    ),
    no_default: bool = typer.Option(
        False, "--no-default", help="Do not make this the active document."
    ),
) -> None:
    """Load an OpenAPI document and store it.

    Args:
        source: URL, local file path, or ``-`` for stdin.
        name: Storage key. When omitted, the document's ``info.title`` is
            slugified.
        no_default: Keep the current active document.

    Raises:
        typer.Exit: With the error's exit code if the document cannot be
            loaded, parsed, or stored.

    Example::

        clearapi load https://petstore3.swagger.io/api/v3/openapi.json
        clearapi load ./openapi.yaml --name shop
        curl -s https://api.example.com/spec | clearapi load -
    """
    from clearapi.config import load_global_config, save_global_config
    from clearapi.generator.grouping import group_operations, operation_count
    from clearapi.parser import extract_document, load_spec, validate_openapi_version
    from clearapi.store import document_exists, document_key, save_document

    info(f"Loading document from: {source}")
    try:
        raw = load_spec(source)
        version = validate_openapi_version(raw)
        if version is None:
            warning("Document has no 'openapi' field; reading it as OpenAPI 3.x.")
        else:
            debug(f"OpenAPI version: {version}")

        document = extract_document(raw, version)
        key = document_key(name) if name else document_key(document.info.title)
        if document_exists(key):
            info(f"Replacing stored document '{key}'.")
        key = save_document(raw, name=key)

        if not no_default:
            config = load_global_config()
            config.default_document = key
            save_global_config(config)
    except ClearApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    count = operation_count(group_operations(document.paths))
    success(
        f"Stored '{document.info.title}' as '{key}' "
        f"({count} operations, {len(document.schemas)} schemas)."
    )
    if no_default:
        suggest(f"Select it with: clearapi docs use {key}")
    else:
        suggest("Browse it with: clearapi endpoints")
