"""Built-in CLI sub-commands for cmspec.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~cmspec.commands.generate` -- compile a content model into an
  OpenAPI document.
* :mod:`~cmspec.commands.inspect` -- list the entities of a content model
  and the paths and schemas it would generate.
* :mod:`~cmspec.commands.verify` -- check a generated document for
  dangling ``$ref`` pointers.
* :mod:`~cmspec.commands.config` -- view and modify user settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``generate`` and ``verify``).
"""
