"""clearapi -- Browse OpenAPI 3 documents and synthesize developer artifacts.

This package loads an OpenAPI v3 document, renders it as a navigable view, and
derives artifacts directly from the document's structure: example JSON
bodies, ready-to-run ``curl`` command lines, and expandable schema trees.

Typical workflow::

    clearapi load ./openapi.json        # store the document, make it default
    clearapi endpoints                  # grouped operations
    clearapi example post /users        # request body example
    clearapi curl post /users/{id}      # copyable command line

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models for the parsed document and configuration.
    parser: Loading, extraction, schema parsing and ``$ref`` resolution.
    generator: Example synthesis, schema trees, grouping and ``curl`` output.
    store: Named document persistence.
    config: XDG-aware configuration and precedence resolution.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
