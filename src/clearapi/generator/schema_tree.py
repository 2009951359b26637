"""Expand nested schemas into a navigable tree.

A property "hides" a nested schema when it is a ``$ref``, an inline object
with properties, or an array whose items are either of those. The two
primitives mirror an interactive viewer's expand toggle:

* :func:`is_expandable` -- should the property get an expand control?
* :func:`get_child_schema` -- the schema shown once it is expanded, together
  with that child's *own* mandatory-field set. Required markers at each
  nesting level come from the level's own ``required`` list, never from the
  parent's.

Which nodes are open is the caller's state; nothing here remembers it.
:func:`build_schema_tree` is the non-interactive counterpart used by the CLI
and the Markdown renderer: it expands everything, stopping at a component
name already on the current path (a cycle) or at a depth limit.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

from clearapi.models import (
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    ReferenceSchema,
    Schema,
    SchemaNode,
    SchemaTreeNode,
    StringSchema,
)
from clearapi.parser.resolver import deref, ref_name, resolve_ref


def is_expandable(schema: Schema) -> bool:
    """Return ``True`` if *schema* hides a nested schema worth expanding."""
    if isinstance(schema, ReferenceSchema):
        return True
    if isinstance(schema, ObjectSchema):
        return bool(schema.properties)
    if isinstance(schema, ArraySchema):
        items = schema.items
        if isinstance(items, ReferenceSchema):
            return True
        return isinstance(items, ObjectSchema) and bool(items.properties)
    return False


def get_child_schema(schema: Schema, components: Mapping[str, Schema]) -> Optional[SchemaNode]:
    """Return the nested schema revealed by expanding *schema*.

    Precedence: reference -> its target (alias chains are followed to the
    end); array of reference -> the items' target; array of inline object
    -> the items schema; inline object -> the schema itself.

    Args:
        schema: A property schema.
        components: The ``components.schemas`` mapping.

    Returns:
        A :class:`~clearapi.models.SchemaNode` carrying the component name
        (for references), the child schema and its mandatory-field set, or
        ``None`` when *schema* is not expandable or its reference does not
        resolve.
    """
    if isinstance(schema, ReferenceSchema):
        return _node_from_ref(schema.ref, components)

    if isinstance(schema, ArraySchema):
        items = schema.items
        if isinstance(items, ReferenceSchema):
            return _node_from_ref(items.ref, components)
        if isinstance(items, ObjectSchema) and items.properties:
            return SchemaNode(schema=items, required=required_fields(items))
        return None

    if isinstance(schema, ObjectSchema) and schema.properties:
        return SchemaNode(schema=schema, required=required_fields(schema))

    return None


def required_fields(schema: Schema) -> frozenset[str]:
    """The mandatory property names declared by *schema* itself."""
    if isinstance(schema, ObjectSchema):
        return frozenset(schema.required)
    return frozenset()


def _node_from_ref(ref: str, components: Mapping[str, Schema]) -> Optional[SchemaNode]:
    # Alias components (A -> B -> object) expand to the end of the chain.
    resolved = deref(ReferenceSchema(ref=ref), components)
    if resolved is None:
        return None
    return SchemaNode(
        name=resolved.name,
        schema=resolved.schema_,
        required=required_fields(resolved.schema_),
    )


def type_label(schema: Optional[Schema]) -> str:
    """Short display label for a schema: ``string``, ``Pet``, ``array<Pet>``, ..."""
    if schema is None:
        return "any"
    if isinstance(schema, ReferenceSchema):
        return ref_name(schema.ref) or schema.ref
    if isinstance(schema, StringSchema):
        return "string"
    if isinstance(schema, NumberSchema):
        return schema.type
    if isinstance(schema, BooleanSchema):
        return "boolean"
    if isinstance(schema, ArraySchema):
        return f"array<{type_label(schema.items)}>" if schema.items is not None else "array"
    if isinstance(schema, ObjectSchema):
        return "object"
    return "any"


def referenced_name(schema: Optional[Schema]) -> Optional[str]:
    """Component name behind a reference or an array of references."""
    if isinstance(schema, ReferenceSchema):
        return ref_name(schema.ref)
    if isinstance(schema, ArraySchema) and isinstance(schema.items, ReferenceSchema):
        return ref_name(schema.items.ref)
    return None


def schema_name(schema: Optional[Schema], components: Mapping[str, Schema]) -> Optional[str]:
    """Display name of a body schema, or ``None`` when there is nothing to show.

    References resolve to their component name (``Pet``, ``array<Pet>``);
    an unresolvable reference or a missing schema gives ``None``. Inline
    schemas use :func:`type_label`.
    """
    if schema is None:
        return None
    if isinstance(schema, ReferenceSchema):
        resolved = resolve_ref(schema.ref, components)
        return resolved.name if resolved is not None else None
    if isinstance(schema, ArraySchema) and isinstance(schema.items, ReferenceSchema):
        inner = schema_name(schema.items, components)
        return f"array<{inner}>" if inner is not None else None
    return type_label(schema)


def build_schema_tree(
    schema: Schema,
    components: Mapping[str, Schema],
    name: Optional[str] = None,
    max_depth: Optional[int] = None,
) -> SchemaTreeNode:
    """Expand *schema* fully into a :class:`~clearapi.models.SchemaTreeNode`.

    The root row describes *schema* itself; its children are the properties
    of the schema it expands to. Each property row is marked ``required``
    according to the ``required`` list of the object that owns it.

    Args:
        schema: The schema to expand (a component, a body schema, ...).
        components: The ``components.schemas`` mapping.
        name: Label for the root row. Defaults to the referenced component
            name, or ``"root"``.
        max_depth: Deepest property level to expand (top-level properties
            are level 1). ``None`` expands without limit; cycles still stop.

    Returns:
        The root node of the expanded tree.
    """
    root_ref = referenced_name(schema)
    seen: frozenset[str] = frozenset({root_ref}) if root_ref else frozenset()

    children: list[SchemaTreeNode] = []
    description = schema.description
    child = get_child_schema(schema, components)
    if child is not None:
        if child.name:
            seen = seen | {child.name}
        children = _expand(child, components, seen, 1, max_depth)
        description = description or child.schema_.description

    return SchemaTreeNode(
        name=name or root_ref or "root",
        type_label=type_label(schema),
        description=description,
        read_only=schema.read_only,
        write_only=schema.write_only,
        ref_name=root_ref,
        children=children,
    )


def _expand(
    node: SchemaNode,
    components: Mapping[str, Schema],
    seen: frozenset[str],
    depth: int,
    max_depth: Optional[int],
) -> list[SchemaTreeNode]:
    """Build the rows for every property of an expanded node."""
    if not isinstance(node.schema_, ObjectSchema):
        return []
    return [
        _property_row(prop_name, prop_schema, prop_name in node.required,
                      components, seen, depth, max_depth)
        for prop_name, prop_schema in node.schema_.properties.items()
    ]


def _property_row(
    name: str,
    schema: Schema,
    required: bool,
    components: Mapping[str, Schema],
    seen: frozenset[str],
    depth: int,
    max_depth: Optional[int],
) -> SchemaTreeNode:
    target = referenced_name(schema)
    row = SchemaTreeNode(
        name=name,
        type_label=type_label(schema),
        required=required,
        description=schema.description,
        read_only=schema.read_only,
        write_only=schema.write_only,
        ref_name=target,
    )
    if not is_expandable(schema):
        return row

    if target is not None and target in seen:
        return row.model_copy(update={"cycle": True})
    if max_depth is not None and depth >= max_depth:
        return row.model_copy(update={"truncated": True})

    child = get_child_schema(schema, components)
    if child is None:
        return row
    if child.name and child.name in seen:
        return row.model_copy(update={"cycle": True})

    child_seen = seen | {child.name} if child.name else seen
    return row.model_copy(
        update={"children": _expand(child, components, child_seen, depth + 1, max_depth)}
    )
