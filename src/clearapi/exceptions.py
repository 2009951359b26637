"""Exception hierarchy for clearapi.

All exceptions inherit from :class:`ClearApiError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`clearapi.exit_codes`.
The top-level error handler in :func:`clearapi.app.main` catches
``ClearApiError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The schema engine itself never raises for document-shape problems: an
unresolved ``$ref`` or an unknown schema is an explicit ``None`` result.
These exceptions belong to the outer layers (loader, store, CLI).

Subclass hierarchy::

    ClearApiError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- NotFoundError       (exit 4)
    +-- SpecParseError      (exit 7)
    +-- StoreError          (exit 8)
    +-- ConfigError         (exit 1)
"""

from clearapi.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_STORE_ERROR,
)


class ClearApiError(Exception):
    """Base exception for all clearapi errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`clearapi.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ClearApiError):
    """Raised for invalid CLI arguments (unknown HTTP method, bad depth, ...)."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(ClearApiError):
    """Raised when a stored document, operation, or named schema does not exist."""

    exit_code = EXIT_NOT_FOUND


class SpecParseError(ClearApiError):
    """Raised when an OpenAPI document cannot be loaded or parsed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class StoreError(ClearApiError):
    """Raised when a stored document is unreadable or cannot be written."""

    exit_code = EXIT_STORE_ERROR


class ConfigError(ClearApiError):
    """Raised for configuration problems (invalid JSON, bad keys, no active document)."""

    exit_code = EXIT_GENERIC_FAILURE
