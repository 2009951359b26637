"""Built-in CLI sub-commands for clearapi.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~clearapi.commands.load` -- load a document and store it.
* :mod:`~clearapi.commands.docs` -- list, select, remove and export stored
  documents.
* :mod:`~clearapi.commands.config` -- view and modify global settings.
* :mod:`~clearapi.commands.inspect` -- browse info, grouped endpoints, one
  operation, and component schemas.
* :mod:`~clearapi.commands.generate` -- example bodies, ``curl`` commands
  and the Markdown reference.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``docs`` and ``config``) or plain callback
functions registered directly on the root app (for single commands like
``load`` or ``curl``).
"""
