"""Inspect commands -- browse a document.

Provides the read-only top-level commands ``info``, ``endpoints``,
``show``, ``schemas`` and ``schema``. Every command works on the active
stored document (see :func:`~clearapi.config.resolve_config`), a named one
via ``--doc``, or a document loaded straight from ``--spec`` without
touching the store.
"""

from __future__ import annotations

from typing import Optional

import typer

from clearapi.exceptions import ClearApiError
from clearapi.exit_codes import EXIT_INVALID_USAGE, EXIT_NOT_FOUND
from clearapi.models import Document, OperationEntry
from clearapi.output import (
    OutputFormat,
    debug,
    error,
    format_response,
    get_output,
    info,
    print_data,
    suggest,
    warning,
)

DOC_HELP = "Stored document key (defaults to the active document)."
SPEC_HELP = "Load this URL or file directly instead of a stored document."
NO_SCHEMA = "no schema"


def load_active_document(doc: Optional[str] = None, spec: Optional[str] = None) -> Document:
    """Load the :class:`~clearapi.models.Document` a command should work on.

    Args:
        doc: Explicit stored document key (``--doc``).
        spec: Source to load directly (``--spec``); wins over *doc*.

    Returns:
        The extracted document.

    Raises:
        typer.Exit: With the error's exit code when no document is active
            or it cannot be loaded.
    """
    from clearapi.config import resolve_config
    from clearapi.exceptions import ConfigError
    from clearapi.parser import extract_document, load_spec, validate_openapi_version
    from clearapi.store import load_document

    try:
        if spec is not None:
            debug(f"Loading document from: {spec}")
            raw = load_spec(spec)
        else:
            _, key = resolve_config(cli_document=doc)
            if key is None:
                raise ConfigError("No active document.")
            debug(f"Using stored document: {key}")
            raw = load_document(key)

        version = validate_openapi_version(raw)
    except ClearApiError as exc:
        error(str(exc))
        if isinstance(exc, ConfigError):
            suggest("Run: clearapi load <url-or-file>")
        raise typer.Exit(code=exc.exit_code) from None

    if version is None:
        warning("Document has no 'openapi' field; reading it as OpenAPI 3.x.")
    return extract_document(raw, version)


def require_operation(document: Document, method: str, path: str) -> OperationEntry:
    """Find ``METHOD PATH`` in *document* or exit with a usage/not-found error."""
    from clearapi.exceptions import InvalidUsageError, NotFoundError
    from clearapi.generator.grouping import find_operation
    from clearapi.models import HTTPMethod

    try:
        if method.lower() not in {m.value for m in HTTPMethod}:
            raise InvalidUsageError(f"Unknown HTTP method: {method}")
        entry = find_operation(document, method, path)
        if entry is None:
            raise NotFoundError(f"Operation {method.upper()} {path} not found")
    except ClearApiError as exc:
        error(str(exc))
        suggest("List operations with: clearapi endpoints")
        raise typer.Exit(code=exc.exit_code) from None
    return entry


def info_command(
    doc: Optional[str] = typer.Option(None, "--doc", "-d", help=DOC_HELP),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_HELP),
) -> None:
    """Show API info (title, version, server, counts).

    Example::

        clearapi info
        clearapi info --json --doc bookstore
    """
    from clearapi.generator.grouping import group_operations, operation_count

    document = load_active_document(doc, spec)
    data = {
        "title": document.info.title,
        "version": document.info.version,
        "openapi_version": document.openapi_version or "-",
        "description": document.info.description or "-",
        "server": document.server_url or "-",
        "operations": operation_count(group_operations(document.paths)),
        "schemas": len(document.schemas),
    }
    format_response(data)


def endpoints_command(
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only show this group."),
    doc: Optional[str] = typer.Option(None, "--doc", "-d", help=DOC_HELP),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_HELP),
) -> None:
    """List operations grouped by tag.

    An operation with several tags is listed under each of them; untagged
    operations are grouped by the first segment of their path.

    Example::

        clearapi endpoints
        clearapi endpoints --tag orders
    """
    from clearapi.generator.grouping import group_operations

    document = load_active_document(doc, spec)
    groups = group_operations(document.paths)

    if tag is not None:
        if tag not in groups:
            error(f"No operations tagged '{tag}'")
            if groups:
                suggest(f"Available groups: {', '.join(groups)}")
            raise typer.Exit(code=EXIT_NOT_FOUND)
        groups = {tag: groups[tag]}

    if not groups:
        info("No operations defined in this document.")
        return

    rows: list[list[str]] = []
    for group, entries in groups.items():
        for entry in entries:
            summary = entry.operation.display_summary
            if entry.operation.deprecated:
                summary += " (deprecated)"
            rows.append([group, entry.method.value.upper(), entry.path, summary])

    get_output().print_table(
        ["Group", "Method", "Path", "Summary"],
        rows,
        title=f"{document.info.title} -- Endpoints",
    )


def show_command(
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    path: str = typer.Argument(help="Path template, e.g. /users/{id}."),
    doc: Optional[str] = typer.Option(None, "--doc", "-d", help=DOC_HELP),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_HELP),
) -> None:
    """Show one operation: parameters, request body and responses.

    Mandatory parameters are marked; body and response schemas show the
    component they reference, or ``no schema`` when there is none to show.

    Example::

        clearapi show get /orders/{id}
    """
    from clearapi.generator.schema_tree import schema_name, type_label

    document = load_active_document(doc, spec)
    entry = require_operation(document, method, path)
    operation = entry.operation
    components = document.schemas

    body = operation.request_body
    data = {
        "method": entry.method.value.upper(),
        "path": entry.path,
        "summary": operation.display_summary,
        "description": operation.description,
        "deprecated": operation.deprecated,
        "tags": operation.tags,
        "parameters": [
            {
                "name": p.name,
                "in": p.location.value,
                "type": type_label(p.schema_),
                "required": p.required,
                "description": p.description,
            }
            for p in operation.parameters
        ],
        "request_body": None if body is None else {
            "description": body.description,
            "required": body.required,
            "schema": schema_name(body.json_schema, components) or NO_SCHEMA,
        },
        "responses": [
            {
                "status": code,
                "description": response.description,
                "schema": schema_name(response.json_schema, components) or NO_SCHEMA,
            }
            for code, response in operation.responses.items()
        ],
    }

    output = get_output()
    if output.format == OutputFormat.JSON:
        format_response(data)
        return

    print_data(f"{data['method']} {data['path']}")
    print_data(data["summary"])
    if operation.description and operation.description != data["summary"]:
        print_data(operation.description)
    if operation.deprecated:
        print_data("Deprecated.")

    if data["parameters"]:
        output.print_table(
            ["Name", "In", "Type", "Required", "Description"],
            [
                [p["name"], p["in"], p["type"], "*" if p["required"] else "", p["description"] or ""]
                for p in data["parameters"]
            ],
            title="Parameters",
        )

    if body is not None:
        marker = " (required)" if body.required else ""
        line = f"Request body{marker}: {data['request_body']['schema']}"
        if body.description:
            line += f" - {body.description}"
        print_data(line)

    if data["responses"]:
        output.print_table(
            ["Status", "Description", "Schema"],
            [[r["status"], r["description"] or "", r["schema"]] for r in data["responses"]],
            title="Responses",
        )


def schemas_command(
    doc: Optional[str] = typer.Option(None, "--doc", "-d", help=DOC_HELP),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_HELP),
) -> None:
    """List the component schemas.

    Shows each schema's type and up to five property names.

    Example::

        clearapi schemas
    """
    from clearapi.generator.schema_tree import type_label
    from clearapi.models import ObjectSchema

    document = load_active_document(doc, spec)
    if not document.schemas:
        info("No schemas defined in this document.")
        return

    rows: list[list[str]] = []
    for name, schema in document.schemas.items():
        prop_names = list(schema.properties) if isinstance(schema, ObjectSchema) else []
        props = ", ".join(prop_names[:5])
        if len(prop_names) > 5:
            props += "..."
        rows.append([name, type_label(schema), props])

    get_output().print_table(["Schema", "Type", "Properties"], rows, title=f"Schemas ({len(rows)})")


def schema_command(
    name: str = typer.Argument(help="Component schema name."),
    depth: Optional[int] = typer.Option(
        None, "--depth", help="Deepest property level to expand (default from config)."
    ),
    doc: Optional[str] = typer.Option(None, "--doc", "-d", help=DOC_HELP),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_HELP),
) -> None:
    """Show a component schema as an expanded tree.

    Required properties are marked per nesting level. A property that
    points back at a schema already open above it is shown as circular
    instead of being expanded again.

    Example::

        clearapi schema Order
        clearapi schema TreeNode --depth 2
    """
    from clearapi.config import load_global_config
    from clearapi.generator.schema_tree import build_schema_tree
    from clearapi.models import ReferenceSchema
    from clearapi.parser.resolver import REF_PREFIX

    if depth is not None and depth < 1:
        error("--depth must be at least 1")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    document = load_active_document(doc, spec)
    if name not in document.schemas:
        error(f"Schema '{name}' not found")
        if document.schemas:
            suggest(f"Available schemas: {', '.join(document.schemas)}")
        raise typer.Exit(code=EXIT_NOT_FOUND)

    max_depth = depth if depth is not None else load_global_config().tree.max_depth
    tree = build_schema_tree(
        ReferenceSchema(ref=REF_PREFIX + name), document.schemas, name=name, max_depth=max_depth
    )
    get_output().print_tree(tree)
