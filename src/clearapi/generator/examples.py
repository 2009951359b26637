"""Synthesize representative values from schemas.

Two policies share one traversal:

* **Literal-default mode** (:func:`synthesize_default`) shows "a real value":
  at every node the ladder is explicit ``default`` -> explicit ``example`` ->
  first ``enum`` entry -> a type-based fallback (``""``, ``0``, ``False``,
  ``[]``, or an object built from every declared property). This is what
  goes into generated ``curl`` bodies.
* **Contextual mode** (:func:`synthesize_example`) shows "the shape of the
  payload": string nodes always render as the placeholder ``"string"``,
  arrays hold one synthesized item, and object properties are filtered by
  direction -- ``readOnly`` fields vanish from request examples,
  ``writeOnly`` fields from response examples.

Both modes resolve ``$ref`` nodes lazily and carry the set of component
names on the current recursion path. Revisiting a name yields *undefined*
for that node, so self-referential schemas (``Node.children -> Node``)
terminate: the key is omitted from its object, or the array comes out
empty. Undefined surfaces as ``None`` from the public functions.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any, Optional

from clearapi.models import (
    ArraySchema,
    BooleanSchema,
    ExampleContext,
    NumberSchema,
    ObjectSchema,
    Operation,
    ReferenceSchema,
    Schema,
    StringSchema,
)
from clearapi.parser.resolver import resolve_ref


class _Undefined:
    """Marker for "no value": omitted from objects, dropped from arrays."""

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()

STRING_PLACEHOLDER = "string"


# ---------------------------------------------------------------------------
# Literal-default mode
# ---------------------------------------------------------------------------


def synthesize_default(schema: Schema, components: Mapping[str, Schema]) -> Any:
    """Derive a literal default value for *schema*.

    Args:
        schema: Any schema node.
        components: The ``components.schemas`` mapping used for ``$ref``
            lookups.

    Returns:
        The synthesized value, or ``None`` when the schema yields nothing
        (unknown type without a hint, unresolved or cyclic reference).

    Example::

        >>> synthesize_default(parse_schema({"type": "array", "items": {"type": "integer"}}), {})
        []
    """
    value = default_value(schema, components)
    return None if value is UNDEFINED else value


def default_value(schema: Schema, components: Mapping[str, Schema]) -> Any:
    """Like :func:`synthesize_default`, but returns :data:`UNDEFINED` for "nothing".

    Use this where an explicit ``default: null`` must stay distinguishable
    from a schema that yields no value.
    """
    return _default_value(schema, components, frozenset())


def _default_value(schema: Schema, components: Mapping[str, Schema], seen: frozenset[str]) -> Any:
    if isinstance(schema, ReferenceSchema):
        return _follow(schema, components, seen, _default_value)

    if schema.has_default:
        return schema.default
    if schema.has_example:
        return schema.example
    if schema.enum:
        return schema.enum[0]

    if isinstance(schema, StringSchema):
        return ""
    if isinstance(schema, NumberSchema):
        return 0
    if isinstance(schema, BooleanSchema):
        return False
    if isinstance(schema, ArraySchema):
        return []
    if isinstance(schema, ObjectSchema):
        result: dict[str, Any] = {}
        for prop_name, prop_schema in schema.properties.items():
            value = _default_value(prop_schema, components, seen)
            if value is not UNDEFINED:
                result[prop_name] = value
        return result

    return UNDEFINED


# ---------------------------------------------------------------------------
# Contextual mode
# ---------------------------------------------------------------------------


def synthesize_example(
    schema: Schema,
    components: Mapping[str, Schema],
    context: Optional[ExampleContext] = None,
) -> Any:
    """Derive a shape-revealing example for *schema*.

    Args:
        schema: Any schema node.
        components: The ``components.schemas`` mapping used for ``$ref``
            lookups.
        context: :attr:`ExampleContext.REQUEST` drops ``readOnly``
            properties, :attr:`ExampleContext.RESPONSE` drops ``writeOnly``
            properties, ``None`` keeps everything.

    Returns:
        The synthesized value, or ``None`` when the schema yields nothing.

    Example::

        >>> synthesize_example(parse_schema({"type": "array", "items": {"type": "integer"}}), {})
        [0]
    """
    value = _example_value(schema, components, context, frozenset())
    return None if value is UNDEFINED else value


def _example_value(
    schema: Schema,
    components: Mapping[str, Schema],
    context: Optional[ExampleContext],
    seen: frozenset[str],
) -> Any:
    if isinstance(schema, ReferenceSchema):
        return _follow(
            schema,
            components,
            seen,
            lambda target, comps, names: _example_value(target, comps, context, names),
        )

    # Strings show their type, never their real default.
    if isinstance(schema, StringSchema):
        return STRING_PLACEHOLDER

    if schema.has_default:
        return schema.default
    if schema.has_example:
        return schema.example
    if schema.enum:
        return schema.enum[0]

    if isinstance(schema, NumberSchema):
        return 0
    if isinstance(schema, BooleanSchema):
        return False
    if isinstance(schema, ArraySchema):
        if schema.items is None:
            return []
        item = _example_value(schema.items, components, context, seen)
        return [] if item is UNDEFINED else [item]
    if isinstance(schema, ObjectSchema):
        result: dict[str, Any] = {}
        for prop_name, prop_schema in schema.properties.items():
            if not is_visible(prop_schema, components, context):
                continue
            value = _example_value(prop_schema, components, context, seen)
            if value is not UNDEFINED:
                result[prop_name] = value
        return result

    return UNDEFINED


def is_visible(
    schema: Schema,
    components: Mapping[str, Schema],
    context: Optional[ExampleContext],
) -> bool:
    """Whether a property belongs in an example for *context*.

    For a reference the flags of both the reference node and its resolved
    target are consulted.
    """
    if context is None:
        return True

    nodes: list[Schema] = [schema]
    if isinstance(schema, ReferenceSchema):
        resolved = resolve_ref(schema.ref, components)
        if resolved is not None:
            nodes.append(resolved.schema_)

    if context == ExampleContext.REQUEST:
        return not any(node.read_only for node in nodes)
    return not any(node.write_only for node in nodes)


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


def _follow(
    schema: ReferenceSchema,
    components: Mapping[str, Schema],
    seen: frozenset[str],
    synthesize: Callable[[Schema, Mapping[str, Schema], frozenset[str]], Any],
) -> Any:
    """Resolve one reference and recurse, short-circuiting on a revisit."""
    resolved = resolve_ref(schema.ref, components)
    if resolved is None or resolved.name in seen:
        return UNDEFINED
    return synthesize(resolved.schema_, components, seen | {resolved.name})


def example_json(
    schema: Schema,
    components: Mapping[str, Schema],
    context: Optional[ExampleContext] = None,
) -> Optional[str]:
    """Render the contextual example of *schema* as 2-space indented JSON.

    Returns:
        The JSON text, or ``None`` when the schema yields nothing.
    """
    value = _example_value(schema, components, context, frozenset())
    if value is UNDEFINED:
        return None
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def request_example(operation: Operation, components: Mapping[str, Schema]) -> Optional[str]:
    """Contextual JSON example of an operation's ``application/json`` request body."""
    if operation.request_body is None:
        return None
    schema = operation.request_body.json_schema
    if schema is None:
        return None
    return example_json(schema, components, ExampleContext.REQUEST)


def response_example(
    operation: Operation,
    status_code: str,
    components: Mapping[str, Schema],
) -> Optional[str]:
    """Contextual JSON example of one response's ``application/json`` body.

    Returns:
        The JSON text, or ``None`` when the status code is not declared or
        the response has no JSON schema.
    """
    response = operation.responses.get(str(status_code))
    if response is None or response.json_schema is None:
        return None
    return example_json(response.json_schema, components, ExampleContext.RESPONSE)
