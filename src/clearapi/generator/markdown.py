"""Render a Markdown API reference from a parsed document.

The reference is the non-interactive form of the viewer: one section per
tag group (operations appear under every tag they carry), each operation
with its parameters, a contextual request example, per-status response
examples and a ``curl`` template, followed by a component schema section
where every schema is expanded as a nested bullet list.

Rendering uses a Jinja2 template bundled in ``clearapi/templates/``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from clearapi.generator.curl import build_command
from clearapi.generator.examples import request_example, response_example
from clearapi.generator.grouping import group_operations, operation_count
from clearapi.generator.schema_tree import build_schema_tree, type_label
from clearapi.models import Document, OperationEntry, ReferenceSchema, SchemaTreeNode
from clearapi.parser.resolver import REF_PREFIX

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
"""Path to the Jinja2 template directory (``clearapi/templates/``)."""

REFERENCE_TEMPLATE = "reference.md.j2"


def render_markdown(document: Document, max_depth: Optional[int] = None) -> str:
    """Render *document* as a Markdown reference.

    Args:
        document: The parsed document.
        max_depth: Property depth limit for the schema section; ``None``
            expands until a cycle.

    Returns:
        The Markdown text, ending with a newline.

    Example::

        text = render_markdown(extract_document(load_spec("bookstore.json")))
        Path("API.md").write_text(text, encoding="utf-8")
    """
    env = _create_jinja_env()
    template = env.get_template(REFERENCE_TEMPLATE)
    return template.render(**_build_context(document, max_depth))


def _create_jinja_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("md.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["type_label"] = type_label
    return env


def _build_context(document: Document, max_depth: Optional[int]) -> dict[str, Any]:
    """Assemble the template variables.

    Returns:
        A dict with ``info``, ``servers``, ``openapi_version``,
        ``operation_count``, ``groups`` (tag -> list of operation dicts) and
        ``schemas`` (list of ``{"name", "lines"}``).
    """
    groups = group_operations(document.paths)
    components = document.schemas

    return {
        "info": document.info,
        "servers": document.servers,
        "openapi_version": document.openapi_version,
        "operation_count": operation_count(groups),
        "groups": {
            tag: [_operation_context(entry, document) for entry in entries]
            for tag, entries in groups.items()
        },
        "schemas": [
            {
                "name": name,
                "lines": tree_lines(
                    build_schema_tree(
                        ReferenceSchema(ref=REF_PREFIX + name), components, max_depth=max_depth
                    )
                ),
            }
            for name in components
        ],
    }


def _operation_context(entry: OperationEntry, document: Document) -> dict[str, Any]:
    operation = entry.operation
    components = document.schemas
    return {
        "method": entry.method.value.upper(),
        "path": entry.path,
        "summary": operation.display_summary,
        "description": operation.description,
        "deprecated": operation.deprecated,
        "parameters": operation.parameters,
        "request_body": operation.request_body,
        "request_example": request_example(operation, components),
        "responses": [
            {
                "status_code": code,
                "description": response.description,
                "example": response_example(operation, code, components),
            }
            for code, response in operation.responses.items()
        ],
        "curl": build_command(
            entry.method, entry.path, operation,
            server=document.server_url, components=components,
        ),
    }


def tree_lines(node: SchemaTreeNode, indent: int = 0) -> list[str]:
    """Flatten the children of *node* into nested Markdown bullet lines."""
    lines: list[str] = []
    for child in node.children:
        text = f"`{child.name}` ({child.type_label})"
        if child.required:
            text += " **required**"
        if child.read_only:
            text += " _read-only_"
        if child.write_only:
            text += " _write-only_"
        if child.cycle:
            text += " (circular)"
        elif child.truncated:
            text += " (...)"
        if child.description:
            text += f": {child.description}"
        lines.append("  " * indent + "- " + text)
        lines.extend(tree_lines(child, indent + 1))
    return lines
