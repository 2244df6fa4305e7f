"""Exception hierarchy for cmspec.

All exceptions inherit from :class:`CmspecError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`cmspec.exit_codes`.
The top-level error handler in :func:`cmspec.app.main` catches
``CmspecError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    CmspecError (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- ConfigError           (exit 1)
    +-- ContentModelError     (exit 7)
    +-- GenerationError       (exit 8)
    |   +-- DuplicateSlugError
    +-- ReferenceError_       (exit 8)
    +-- OutputError           (exit 9)
"""

from cmspec.exit_codes import (
    EXIT_CONTENT_MODEL_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_OUTPUT_ERROR,
)


class CmspecError(Exception):
    """Base exception for all cmspec errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`cmspec.exit_codes`. The entry point catches
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


class InvalidUsageError(CmspecError):
    """Raised for invalid CLI arguments or option values."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(CmspecError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class ContentModelError(CmspecError):
    """Raised when the content model cannot be loaded or fails validation."""

    exit_code = EXIT_CONTENT_MODEL_ERROR


class GenerationError(CmspecError):
    """Raised when generation hits an internal invariant violation.

    The classic case is a structural-only field (``tabs`` or ``ui``) reaching
    the leaf mapper. Generation aborts and no document is produced.
    """

    exit_code = EXIT_GENERATION_ERROR


class DuplicateSlugError(GenerationError):
    """Raised in strict mode when two entities would emit the same component."""


class ReferenceError_(CmspecError):
    """Raised when a document contains ``$ref`` pointers with no target.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ReferenceError``.
    """

    exit_code = EXIT_GENERATION_ERROR


class OutputError(CmspecError):
    """Raised when the generated document cannot be written to disk."""

    exit_code = EXIT_OUTPUT_ERROR
