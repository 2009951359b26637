"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~clearapi.exceptions.ClearApiError` subclass.
Shell wrappers can inspect the exit code to tell a missing document from a
broken one without parsing stderr.

Example::

    $ clearapi show get /nowhere
    $ echo $?
    4   # EXIT_NOT_FOUND -- no such operation in the document
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""The requested document, operation, or schema does not exist."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be loaded or parsed."""

EXIT_STORE_ERROR = 8
"""The document store could not be read or written."""
