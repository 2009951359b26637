"""Generate commands -- derive artifacts from a document.

* ``clearapi example`` -- contextual JSON example of a request body, or of a
  response body with ``--response``.
* ``clearapi curl`` -- a copyable ``curl`` command template.
* ``clearapi render`` -- the whole document as a Markdown reference.

Generated text goes to stdout (or the global ``-o`` file); diagnostics go
to stderr.
"""

from __future__ import annotations

from typing import Optional

import typer

from clearapi.commands.inspect import (
    DOC_HELP,
    SPEC_HELP,
    load_active_document,
    require_operation,
)
from clearapi.exit_codes import EXIT_NOT_FOUND
from clearapi.output import debug, error, info, print_code, suggest


def example_command(
    method: str = typer.Argument(help="HTTP method, e.g. POST."),
    path: str = typer.Argument(help="Path template, e.g. /users."),
    response: Optional[str] = typer.Option(
        None, "--response", "-r", help="Show the example for this response status code."
    ),
    doc: Optional[str] = typer.Option(None, "--doc", "-d", help=DOC_HELP),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_HELP),
) -> None:
    """Print an example JSON body for an operation.

    Request examples leave out ``readOnly`` properties and response
    examples leave out ``writeOnly`` ones. Strings show the placeholder
    ``"string"``; arrays hold a single item.

    Example::

        clearapi example post /users
        clearapi example get /users/{id} --response 200
    """
    from clearapi.generator.examples import request_example, response_example

    document = load_active_document(doc, spec)
    entry = require_operation(document, method, path)
    operation = entry.operation
    label = f"{entry.method.value.upper()} {entry.path}"

    if response is None:
        if operation.request_body is None:
            info(f"{label} has no request body.")
            return
        text = request_example(operation, document.schemas)
        if text is None:
            info(f"{label} has no JSON request body schema.")
            return
    else:
        if response not in operation.responses:
            error(f"{label} declares no response '{response}'")
            if operation.responses:
                suggest(f"Declared responses: {', '.join(operation.responses)}")
            raise typer.Exit(code=EXIT_NOT_FOUND)
        text = response_example(operation, response, document.schemas)
        if text is None:
            info(f"Response {response} of {label} has no JSON schema.")
            return

    print_code(text, "json")


def curl_command(
    method: str = typer.Argument(help="HTTP method, e.g. POST."),
    path: str = typer.Argument(help="Path template, e.g. /users/{id}."),
    server: Optional[str] = typer.Option(
        None, "--server", help="Base URL to use instead of the document's first server."
    ),
    doc: Optional[str] = typer.Option(None, "--doc", "-d", help=DOC_HELP),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_HELP),
) -> None:
    """Print a copyable curl command for an operation.

    Path parameters become ``:name`` placeholders and the body is built
    from the schema's real defaults and examples.

    Example::

        clearapi curl post /users/{id}/roles
        clearapi curl get /orders --server http://localhost:8000
    """
    from clearapi.generator.curl import build_command

    document = load_active_document(doc, spec)
    entry = require_operation(document, method, path)

    base_url = server if server is not None else document.server_url
    if base_url is None:
        debug("Document declares no servers; leaving the URL relative.")

    print_code(
        build_command(entry.method, entry.path, entry.operation, base_url, document.schemas),
        "bash",
    )


def render_command(
    doc: Optional[str] = typer.Option(None, "--doc", "-d", help=DOC_HELP),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_HELP),
) -> None:
    """Render the document as a Markdown reference.

    Example::

        clearapi render
        clearapi -o API.md render
    """
    from clearapi.config import load_global_config
    from clearapi.generator.markdown import render_markdown

    document = load_active_document(doc, spec)
    text = render_markdown(document, max_depth=load_global_config().tree.max_depth)
    print_code(text, "markdown")
