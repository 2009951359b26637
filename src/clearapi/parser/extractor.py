"""Extract a :class:`~clearapi.models.Document` from a raw OpenAPI dict.

This module walks a raw OpenAPI document and builds the immutable
:class:`~clearapi.models.Document` view that every generator consumes.
Unlike a validator it is total: missing or malformed sections (``info``,
``servers``, ``paths``, ``components``) are treated as empty, and entries
that are not dicts are skipped. ``$ref`` pointers are kept as
:class:`~clearapi.models.ReferenceSchema` nodes and resolved lazily later.

The single public entry point is :func:`extract_document`. Internally it
delegates to private helpers that each handle one section:

* ``_extract_info`` -- the ``info`` object (title, version, description).
* ``_extract_servers`` -- the ``servers`` array.
* ``_extract_paths`` -- the ``paths`` object, keeping document order for
  both paths and methods.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they share
the same ``name`` and ``in`` values.
"""

from __future__ import annotations

from typing import Any, Optional

from clearapi.models import (
    APIInfo,
    Document,
    HTTPMethod,
    MediaType,
    Operation,
    Parameter,
    ParameterLocation,
    RequestBody,
    Response,
    ServerInfo,
)
from clearapi.parser.schema import parse_schema, parse_schemas

_HTTP_METHODS = {m.value: m for m in HTTPMethod}


def extract_document(raw: dict[str, Any], openapi_version: Optional[str] = None) -> Document:
    """Build a :class:`~clearapi.models.Document` from a raw OpenAPI dict.

    Args:
        raw: The raw document dictionary as returned by
            :func:`~clearapi.parser.loader.load_spec`.
        openapi_version: The version string returned by
            :func:`~clearapi.parser.loader.validate_openapi_version`. When
            omitted, the document's own ``openapi`` field is used.

    Returns:
        The parsed document.

    Example::

        raw = load_spec("bookstore.json")
        document = extract_document(raw)
        for path, methods in document.paths.items():
            for method in methods:
                print(f"{method.value.upper()} {path}")
    """
    components = raw.get("components")
    schemas_raw = components.get("schemas") if isinstance(components, dict) else None

    if openapi_version is None and raw.get("openapi") is not None:
        openapi_version = str(raw["openapi"])

    return Document(
        info=_extract_info(raw),
        servers=_extract_servers(raw),
        paths=_extract_paths(raw),
        schemas=parse_schemas(schemas_raw),
        openapi_version=openapi_version,
        raw=raw,
    )


def _extract_info(raw: dict[str, Any]) -> APIInfo:
    """Extract title, version and description from the ``info`` object.

    Missing fields keep the :class:`~clearapi.models.APIInfo` defaults.
    """
    info = raw.get("info")
    if not isinstance(info, dict):
        return APIInfo()

    fields: dict[str, Any] = {}
    if info.get("title"):
        fields["title"] = str(info["title"])
    if info.get("version") is not None:
        fields["version"] = str(info["version"])
    if isinstance(info.get("description"), str):
        fields["description"] = info["description"]
    return APIInfo(**fields)


def _extract_servers(raw: dict[str, Any]) -> list[ServerInfo]:
    """Extract server entries; entries without a string ``url`` are skipped."""
    servers = raw.get("servers")
    if not isinstance(servers, list):
        return []

    return [
        ServerInfo(url=server["url"], description=_text(server.get("description")))
        for server in servers
        if isinstance(server, dict) and isinstance(server.get("url"), str)
    ]


def _extract_paths(raw: dict[str, Any]) -> dict[str, dict[HTTPMethod, Operation]]:
    """Extract every operation from the ``paths`` object.

    Method keys are matched case-insensitively against the HTTP methods
    OpenAPI allows; all other path item keys (``parameters``, ``summary``,
    ``servers``, extensions) are not operations. Document order is kept for
    paths and for methods within a path.

    Returns:
        A mapping of path template to ``{method: Operation}``. Paths with no
        operations are kept with an empty mapping.
    """
    paths = raw.get("paths")
    if not isinstance(paths, dict):
        return {}

    result: dict[str, dict[HTTPMethod, Operation]] = {}
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        path_params = path_item.get("parameters")
        if not isinstance(path_params, list):
            path_params = []

        methods: dict[HTTPMethod, Operation] = {}
        for key, operation in path_item.items():
            method = _HTTP_METHODS.get(str(key).lower())
            if method is None or not isinstance(operation, dict):
                continue
            methods[method] = _extract_operation(operation, path_params)

        result[str(path)] = methods

    return result


def _extract_operation(operation: dict[str, Any], path_params: list[Any]) -> Operation:
    """Build one :class:`~clearapi.models.Operation` from its raw dict."""
    op_params = operation.get("parameters")
    if not isinstance(op_params, list):
        op_params = []

    tags = operation.get("tags")
    if not isinstance(tags, list):
        tags = []

    responses = operation.get("responses")

    return Operation(
        tags=[str(t) for t in tags if isinstance(t, str)],
        summary=_text(operation.get("summary")),
        description=_text(operation.get("description")),
        operation_id=_text(operation.get("operationId")),
        parameters=_extract_parameters(_merge_parameters(path_params, op_params)),
        request_body=_extract_request_body(operation.get("requestBody")),
        responses=_extract_responses(responses if isinstance(responses, dict) else {}),
        deprecated=bool(operation.get("deprecated", False)),
    )


def _merge_parameters(
    path_params: list[Any],
    op_params: list[Any],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field), per the OpenAPI spec. Non-dict entries
    are dropped.
    """
    op_dicts = [p for p in op_params if isinstance(p, dict)]
    op_keys = {(p.get("name", ""), p.get("in", "")) for p in op_dicts}

    merged = [
        p for p in path_params
        if isinstance(p, dict) and (p.get("name", ""), p.get("in", "")) not in op_keys
    ]
    merged.extend(op_dicts)
    return merged


def _extract_parameters(params_list: list[dict[str, Any]]) -> list[Parameter]:
    """Convert raw parameter dicts into :class:`~clearapi.models.Parameter` models.

    Parameters without a name or with an unrecognised ``in`` location are
    skipped. Path parameters are always required regardless of the
    ``required`` field in the source.
    """
    parameters: list[Parameter] = []

    for param in params_list:
        name = param.get("name")
        if not isinstance(name, str) or not name:
            continue

        try:
            location = ParameterLocation(param.get("in", "query"))
        except ValueError:
            continue

        required = bool(param.get("required", False))
        if location == ParameterLocation.PATH:
            required = True

        parameters.append(
            Parameter(
                name=name,
                location=location,
                required=required,
                description=_text(param.get("description")),
                schema=parse_schema(param.get("schema")),
            )
        )

    return parameters


def _extract_content(content: Any) -> dict[str, MediaType]:
    """Parse a ``content`` map, keeping every media type key."""
    if not isinstance(content, dict):
        return {}
    return {
        str(media_type): MediaType(
            schema=parse_schema(entry.get("schema")) if isinstance(entry, dict) else None
        )
        for media_type, entry in content.items()
    }


def _extract_request_body(body: Any) -> Optional[RequestBody]:
    """Extract an operation's ``requestBody``; ``None`` when absent."""
    if not isinstance(body, dict):
        return None

    return RequestBody(
        description=_text(body.get("description")),
        required=bool(body.get("required", False)),
        content=_extract_content(body.get("content")),
    )


def _extract_responses(responses: dict[str, Any]) -> dict[str, Response]:
    """Extract response metadata for all declared status codes, in order."""
    result: dict[str, Response] = {}

    for status_code, response in responses.items():
        if not isinstance(response, dict):
            continue
        code = str(status_code)
        result[code] = Response(
            status_code=code,
            description=_text(response.get("description")),
            content=_extract_content(response.get("content")),
        )

    return result


def _text(value: Any) -> Optional[str]:
    """Return *value* when it is a string, else ``None``."""
    return value if isinstance(value, str) else None
