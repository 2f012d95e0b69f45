"""Exception hierarchy for structdoc.

All exceptions inherit from :class:`StructdocError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`structdoc.exit_codes`.
The top-level error handler in :func:`structdoc.app.main` catches
``StructdocError`` and exits with the appropriate code.

The transformation core never lets these escape for a well-formed or
malformed document alike: :class:`ReferenceNotFoundError` is raised by the
resolver and recovered by its callers, which degrade the affected node to an
empty object schema.

Subclass hierarchy::

    StructdocError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- DocumentParseError      (exit 7)
    +-- ReferenceNotFoundError  (exit 8)
    +-- ConfigError             (exit 1)
"""

from structdoc.exit_codes import (
    EXIT_DOCUMENT_PARSE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_REFERENCE_NOT_FOUND,
)


class StructdocError(Exception):
    """Base exception for all structdoc errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`structdoc.exit_codes`. The entry point catches
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


class InvalidUsageError(StructdocError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class DocumentParseError(StructdocError):
    """Raised when an input document cannot be read or parsed as JSON/YAML."""

    exit_code = EXIT_DOCUMENT_PARSE_ERROR


class ReferenceNotFoundError(StructdocError):
    """Raised when a ``$ref`` pointer does not lead anywhere in the document.

    Args:
        ref: The offending pointer string (e.g. ``"#/components/schemas/Pet"``).
        message: Human-readable description of which segment failed.
    """

    exit_code = EXIT_REFERENCE_NOT_FOUND

    def __init__(self, ref: str, message: str):
        super().__init__(message)
        self.ref = ref


class ConfigError(StructdocError):
    """Raised for configuration problems (missing file, invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
