"""Turn raw JSON Schema dicts into the tagged :data:`~clearapi.models.Schema` variant.

The rest of the engine never inspects raw schema dicts. Everything goes
through :func:`parse_schema`, which decides once per node which variant it
is:

* a dict with a ``$ref`` key is a :class:`~clearapi.models.ReferenceSchema`
  (sibling keys other than the annotations are ignored, as in OpenAPI 3.0);
* otherwise ``type`` selects the variant, with OpenAPI 3.1 type arrays
  (``["string", "null"]``) collapsed to their first non-null entry;
* anything else -- no ``type``, ``allOf``/``oneOf`` composites, unknown
  type names -- becomes an :class:`~clearapi.models.UnknownSchema`.

Nested ``properties`` and ``items`` are parsed recursively. ``$ref``
targets are *not* followed here; see :mod:`clearapi.parser.resolver`.
"""

from __future__ import annotations

from typing import Any, Optional

from clearapi.models import (
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    ReferenceSchema,
    Schema,
    StringSchema,
    UnknownSchema,
)


def parse_schema(raw: Any) -> Optional[Schema]:
    """Parse a raw schema dict into its tagged variant.

    Args:
        raw: A schema value from the document. Non-dict values (a stray
            string, ``None``) are not schemas.

    Returns:
        The parsed schema, or ``None`` when *raw* is not a dict.

    Example::

        >>> parse_schema({"type": "array", "items": {"$ref": "#/components/schemas/Pet"}})
        ArraySchema(..., items=ReferenceSchema(..., ref='#/components/schemas/Pet'))
    """
    if not isinstance(raw, dict):
        return None

    common = _common_fields(raw)

    ref = raw.get("$ref")
    if isinstance(ref, str):
        return ReferenceSchema(ref=ref, **common)

    schema_type = extract_schema_type(raw)

    if schema_type == "string":
        return StringSchema(format=raw.get("format"), **common)

    if schema_type in ("number", "integer"):
        return NumberSchema(type=schema_type, format=raw.get("format"), **common)

    if schema_type == "boolean":
        return BooleanSchema(**common)

    if schema_type == "array":
        return ArraySchema(items=parse_schema(raw.get("items")), **common)

    if schema_type == "object":
        properties: dict[str, Schema] = {}
        raw_props = raw.get("properties")
        if isinstance(raw_props, dict):
            for prop_name, prop_raw in raw_props.items():
                parsed = parse_schema(prop_raw)
                if parsed is not None:
                    properties[str(prop_name)] = parsed
        raw_required = raw.get("required")
        required = (
            [str(n) for n in raw_required] if isinstance(raw_required, list) else []
        )
        return ObjectSchema(properties=properties, required=required, **common)

    return UnknownSchema(raw=raw, **common)


def parse_schemas(raw: Any) -> dict[str, Schema]:
    """Parse a ``components.schemas`` mapping, skipping non-dict entries."""
    if not isinstance(raw, dict):
        return {}
    schemas: dict[str, Schema] = {}
    for name, schema_raw in raw.items():
        parsed = parse_schema(schema_raw)
        if parsed is not None:
            schemas[str(name)] = parsed
    return schemas


def extract_schema_type(raw: dict[str, Any]) -> Optional[str]:
    """Return the declared ``type`` of a raw schema.

    Handles OpenAPI 3.1 type arrays by returning the first non-null type.

    Args:
        raw: A raw schema dict.

    Returns:
        The type string, or ``None`` when no usable type is declared.
    """
    type_value = raw.get("type")

    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else None

    if isinstance(type_value, str):
        return type_value

    return None


def _common_fields(raw: dict[str, Any]) -> dict[str, Any]:
    """Collect the annotation keys every variant shares.

    Only keys present in *raw* are returned so that ``has_default`` and
    ``has_example`` reflect the document, not the model defaults.
    """
    fields: dict[str, Any] = {}
    if isinstance(raw.get("description"), str):
        fields["description"] = raw["description"]
    if "default" in raw:
        fields["default"] = raw["default"]
    if "example" in raw:
        fields["example"] = raw["example"]
    if isinstance(raw.get("enum"), list):
        fields["enum"] = list(raw["enum"])
    if raw.get("readOnly") is True:
        fields["read_only"] = True
    if raw.get("writeOnly") is True:
        fields["write_only"] = True
    return fields
