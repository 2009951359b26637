"""Load OpenAPI documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw OpenAPI documents and converting
them into Python dictionaries. It supports both JSON and YAML formats with
automatic format detection. The schema engine never calls it: loading is the
outer layer's job, and the engine only ever sees the parsed result.

The two public functions are:

* :func:`load_spec` -- Load and parse a document from any supported source.
* :func:`validate_openapi_version` -- Check the ``openapi`` version string,
  rejecting Swagger 2.x whose ``#/definitions`` references are not supported.

After loading, the raw dict should be passed to
:func:`~clearapi.parser.extractor.extract_document`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from clearapi.exceptions import SpecParseError


def load_spec(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin, trying JSON then YAML."""
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from URL. Supports JSON and YAML responses.

    Args:
        url: The HTTP(S) URL to fetch.

    Returns:
        The parsed document dictionary.

    Raises:
        SpecParseError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Supports .json, .yaml, and .yml extensions. Falls back to content-based
    detection if the extension is not recognized.

    Raises:
        SpecParseError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Document file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read document file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Document file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        SpecParseError: If the content cannot be parsed as either format, or
            parses to something other than an object.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise SpecParseError(
                    f"Document must be a JSON/YAML object (got {type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        if not isinstance(result, dict):
            got = type(result).__name__ if result is not None else "empty document"
            raise SpecParseError(f"Document must be a JSON/YAML object (got {got})")
        return result

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecParseError(msg)


def validate_openapi_version(spec: dict[str, Any]) -> Optional[str]:
    """Validate and return the OpenAPI version string.

    Any 3.x version is accepted. A document without an ``openapi`` field is
    still accepted (``None`` is returned) because every engine operation
    degrades gracefully on partial documents; callers may warn.

    Args:
        spec: The parsed document dictionary.

    Returns:
        The OpenAPI version string (e.g., ``'3.0.3'``), or ``None`` when the
        field is missing.

    Raises:
        SpecParseError: For Swagger 2.x documents or a non-3.x version.
    """
    if "swagger" in spec:
        swagger_ver = str(spec["swagger"])
        raise SpecParseError(
            f"Swagger {swagger_ver} is not supported. "
            "Only OpenAPI 3.x documents (#/components/schemas references) are supported. "
            "Consider converting with https://converter.swagger.io"
        )

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        return None

    version_str = str(openapi_version)
    if version_str.startswith("3."):
        return version_str

    raise SpecParseError(
        f"Unsupported OpenAPI version: {version_str}. Only OpenAPI 3.x is supported."
    )
