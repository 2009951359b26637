"""OpenAPI document parser -- load, extract, and resolve ``$ref`` pointers.

This sub-package turns a raw OpenAPI 3.x document (JSON or YAML, local file,
remote URL or stdin) into the immutable :class:`~clearapi.models.Document`
that the generators consume.

Typical usage::

    from clearapi.parser import load_spec, validate_openapi_version, extract_document

    raw = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    version = validate_openapi_version(raw)
    document = extract_document(raw, version)

Sub-modules:

* :mod:`~clearapi.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~clearapi.parser.schema` -- Converts raw JSON Schema dicts into the
  tagged :data:`~clearapi.models.Schema` variants.
* :mod:`~clearapi.parser.resolver` -- Lazy ``#/components/schemas/<Name>``
  lookup and reference-chain following.
* :mod:`~clearapi.parser.extractor` -- Walks the raw document and produces
  the :class:`~clearapi.models.Document`.
"""

from clearapi.parser.extractor import extract_document
from clearapi.parser.loader import load_spec, validate_openapi_version
from clearapi.parser.resolver import resolve_ref
from clearapi.parser.schema import parse_schema

__all__ = [
    "load_spec",
    "validate_openapi_version",
    "extract_document",
    "parse_schema",
    "resolve_ref",
]
