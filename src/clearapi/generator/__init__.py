"""Artifact generators -- derive developer-facing output from a parsed document.

Everything here is a pure function of a :class:`~clearapi.models.Document`
(or one of its schemas) and performs no I/O.

Typical usage::

    from clearapi.generator import build_command, group_operations, synthesize_example

    groups = group_operations(document.paths)
    body = synthesize_example(schema, document.schemas, ExampleContext.REQUEST)
    print(build_command("post", "/users", operation, document.server_url, document.schemas))

Sub-modules:

* :mod:`~clearapi.generator.examples` -- Literal-default and contextual
  example synthesis with cycle protection.
* :mod:`~clearapi.generator.schema_tree` -- Expand-on-demand primitives and
  the fully expanded schema tree.
* :mod:`~clearapi.generator.grouping` -- Tag fan-out grouping of operations.
* :mod:`~clearapi.generator.curl` -- ``curl`` command templates.
* :mod:`~clearapi.generator.markdown` -- Jinja2 Markdown reference.
"""

from clearapi.generator.curl import build_command
from clearapi.generator.examples import default_value, synthesize_default, synthesize_example
from clearapi.generator.grouping import find_operation, group_operations
from clearapi.generator.schema_tree import build_schema_tree, get_child_schema, is_expandable

__all__ = [
    "build_command",
    "default_value",
    "synthesize_default",
    "synthesize_example",
    "group_operations",
    "find_operation",
    "build_schema_tree",
    "get_child_schema",
    "is_expandable",
]
