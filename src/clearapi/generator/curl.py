"""Build copy-pasteable ``curl`` commands for an operation.

The command is a template, not a ready-to-run request: path parameters
stay as ``:name`` placeholders, the bearer token is ``<token>``, and the
body is the *literal-default* synthesis of the ``application/json`` request
schema (real defaults and examples, not type placeholders).

Output layout, one flag per continuation line::

    curl -X POST "https://api.example.com/users/:id/roles" \\
      -H "Content-Type: application/json" \\
      -H "Authorization: Bearer <token>" \\
      -d '{
      "role": "admin"
    }'
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any, Optional, Union

from clearapi.generator.examples import UNDEFINED, default_value
from clearapi.models import HTTPMethod, Operation, Schema

LINE_SEPARATOR = " \\\n  "
TOKEN_PLACEHOLDER = "<token>"

_PATH_PARAM_RE = re.compile(r"\{([^{}/]+)\}")


def placeholder_path(path: str) -> str:
    """Rewrite ``{name}`` path segments as ``:name`` placeholders."""
    return _PATH_PARAM_RE.sub(r":\1", path)


def join_url(server: Optional[str], path: str) -> str:
    """Join a server base URL and a path template with exactly one ``/``.

    One trailing ``/`` is dropped from the server and one leading ``/`` from
    the path. Without a server the path is returned as-is.
    """
    if not server:
        return path
    base = server[:-1] if server.endswith("/") else server
    tail = path[1:] if path.startswith("/") else path
    return f"{base}/{tail}"


def shell_quote(text: str) -> str:
    """Single-quote *text* for a POSIX shell (``'`` becomes ``'\\''``)."""
    return "'" + text.replace("'", "'\\''") + "'"


def build_command(
    method: Union[HTTPMethod, str],
    path: str,
    operation: Operation,
    server: Optional[str] = None,
    components: Optional[Mapping[str, Schema]] = None,
) -> str:
    """Build the ``curl`` command text for one operation.

    Args:
        method: HTTP method (any case, or a :class:`~clearapi.models.HTTPMethod`).
        path: The path template, e.g. ``/users/{id}/roles``.
        operation: The operation being invoked.
        server: Base URL to prefix; ``None`` leaves the path relative.
        components: ``components.schemas`` used to resolve the body schema.

    Returns:
        The multi-line command. The ``Content-Type`` header and the ``-d``
        body appear only when the operation declares a request body; the
        body is left out when its schema synthesizes to nothing.
    """
    verb = method.value if isinstance(method, HTTPMethod) else str(method)
    url = join_url(server, placeholder_path(path))

    lines = [f'curl -X {verb.upper()} "{url}"']
    if operation.request_body is not None:
        lines.append('-H "Content-Type: application/json"')
    lines.append(f'-H "Authorization: Bearer {TOKEN_PLACEHOLDER}"')

    body = _body_value(operation, components or {})
    if body is not UNDEFINED:
        lines.append("-d " + shell_quote(json.dumps(body, indent=2, ensure_ascii=False, default=str)))

    return LINE_SEPARATOR.join(lines)


def request_body_value(operation: Operation, components: Mapping[str, Schema]) -> Any:
    """Literal-default value of the ``application/json`` request body, or ``None``.

    ``None`` is ambiguous here: it is returned both when there is no body
    and when the schema declares ``default: null``. :func:`build_command`
    keeps the two apart and still emits ``-d 'null'`` for the latter.
    """
    body = _body_value(operation, components)
    return None if body is UNDEFINED else body


def _body_value(operation: Operation, components: Mapping[str, Schema]) -> Any:
    if operation.request_body is None:
        return UNDEFINED
    schema = operation.request_body.json_schema
    if schema is None:
        return UNDEFINED
    return default_value(schema, components)
