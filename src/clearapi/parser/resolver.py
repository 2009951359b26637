"""Resolve ``$ref`` pointers against ``components.schemas``.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition. Only that one
local form is supported: external files, URLs, and any other JSON Pointer
fragment are reported as *not resolved* (``None``), never as an exception,
so a single bad pointer cannot break the rendering of a whole document.

Resolution is lazy. :func:`resolve_ref` looks up exactly one level and
returns the registered schema as-is; callers that need to descend further
resolve nested references themselves, carrying their own visited set.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

from clearapi.models import ReferenceSchema, ResolvedSchema, Schema

REF_PREFIX = "#/components/schemas/"


def ref_name(ref: str) -> Optional[str]:
    """Extract the component name from a local schema reference.

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Pet"``).

    Returns:
        The component name (``"Pet"``), or ``None`` when *ref* is not of the
        form ``#/components/schemas/<Name>``.
    """
    if not isinstance(ref, str) or not ref.startswith(REF_PREFIX):
        return None
    name = ref[len(REF_PREFIX):]
    if not name or "/" in name:
        return None
    return name


def resolve_ref(ref: str, components: Mapping[str, Schema]) -> Optional[ResolvedSchema]:
    """Resolve a local schema reference to its named schema.

    Args:
        ref: The ``$ref`` string.
        components: The ``components.schemas`` mapping.

    Returns:
        A :class:`~clearapi.models.ResolvedSchema` holding the name and the
        schema exactly as registered, or ``None`` when the reference form is
        unsupported or the name is not registered.

    Example::

        resolved = resolve_ref("#/components/schemas/Pet", document.schemas)
        if resolved is None:
            ...  # render "no schema available"
    """
    name = ref_name(ref)
    if name is None:
        return None
    schema = components.get(name)
    if schema is None:
        return None
    return ResolvedSchema(name=name, schema=schema)


def deref(schema: Schema, components: Mapping[str, Schema]) -> Optional[ResolvedSchema]:
    """Follow a chain of references until a concrete schema is reached.

    A schema that is not a reference resolves to itself with an empty name.
    The result name is the *last* component name on the chain
    (``A -> B -> object`` yields ``B``).

    Args:
        schema: Any schema node.
        components: The ``components.schemas`` mapping.

    Returns:
        The concrete schema, or ``None`` when a link is unresolved or the
        chain loops back on itself.
    """
    seen: set[str] = set()
    name = ""
    current: Schema = schema
    while isinstance(current, ReferenceSchema):
        if current.ref in seen:
            return None
        seen.add(current.ref)
        resolved = resolve_ref(current.ref, components)
        if resolved is None:
            return None
        name = resolved.name
        current = resolved.schema_
    return ResolvedSchema(name=name, schema=current)
