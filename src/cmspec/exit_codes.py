"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~cmspec.exceptions.CmspecError` subclass.
External tooling (CI scripts, build hooks) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ cmspec generate broken-model.json
    $ echo $?
    7   # EXIT_CONTENT_MODEL_ERROR -- the model could not be loaded
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_CONTENT_MODEL_ERROR = 7
"""The content model could not be read, parsed, or validated."""

EXIT_GENERATION_ERROR = 8
"""Document generation aborted on an internal invariant violation."""

EXIT_OUTPUT_ERROR = 9
"""The generated document could not be written."""
