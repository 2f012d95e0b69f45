"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~structdoc.exceptions.StructdocError` subclass.
Shell wrappers and CI scripts can inspect the exit code to tell a bad
document from a bad config file without parsing stderr.

Example::

    $ structdoc build broken.yaml
    $ echo $?
    7   # EXIT_DOCUMENT_PARSE_ERROR -- the file is neither JSON nor YAML
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_DOCUMENT_PARSE_ERROR = 7
"""The input document could not be read or parsed."""

EXIT_REFERENCE_NOT_FOUND = 8
"""A ``$ref`` pointer could not be resolved inside the document."""
