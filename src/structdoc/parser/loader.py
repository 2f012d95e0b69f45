"""Parse documents from a local file or stdin, and sniff their version.

The transformation core only ever sees an in-memory mapping.  This module
is the thin harness the CLI uses to produce one: it reads text from a path
(or ``-`` for stdin), parses it as JSON or YAML with automatic format
detection, and reports which OpenAPI/Swagger version the document claims.

The public functions are:

* :func:`load_document` -- Read and parse a document from a path or stdin.
* :func:`parse_document` -- Parse already-read text.
* :func:`detect_spec_version` -- Return the ``openapi`` / ``swagger`` marker,
  or ``None``.  Never raises: unknown shapes are still transformed.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from structdoc.exceptions import DocumentParseError

logger = logging.getLogger(__name__)


def load_document(source: str) -> dict[str, Any]:
    """Load a document from a file path or stdin (``'-'``).

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A file path, or ``'-'`` for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        DocumentParseError: If the source cannot be read or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise DocumentParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DocumentParseError("No input received from stdin")

    return parse_document(content)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    ``.json``, ``.yaml`` and ``.yml`` extensions pick the parser first;
    anything else falls back to content-based detection.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentParseError(f"Document file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentParseError(f"Failed to read document {path}: {exc}") from exc

    if not content.strip():
        raise DocumentParseError(f"Document file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return parse_document(content, hint=hint)


def parse_document(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        DocumentParseError: If the content cannot be parsed as either
            format, or does not hold a mapping at the top level.
    """
    json_error: Optional[Exception] = None
    yaml_error: Optional[Exception] = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise DocumentParseError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        return _require_mapping(result)

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise DocumentParseError(msg)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        found = type(result).__name__ if result is not None else "empty document"
        raise DocumentParseError(f"Document must be a JSON/YAML object (got {found})")
    return result


def detect_spec_version(document: Any) -> Optional[str]:
    """Return the version marker a document declares.

    Looks for ``openapi: "3.*"`` first, then ``swagger: "2.*"``.  Other
    values are returned as-is with a warning; a missing marker returns
    ``None``.  This is shape-sniffing only, never validation.

    Example::

        >>> detect_spec_version({"openapi": "3.0.3"})
        '3.0.3'
        >>> detect_spec_version({"swagger": "2.0"})
        '2.0'
        >>> detect_spec_version({}) is None
        True
    """
    if not isinstance(document, dict):
        logger.warning("Document is not a mapping; nothing to transform")
        return None

    for marker, major in (("openapi", "3."), ("swagger", "2.")):
        if marker in document:
            version = str(document[marker])
            if not version.startswith(major):
                logger.warning("Unexpected %s version '%s'", marker, version)
            return version

    logger.warning("Document declares neither 'openapi' nor 'swagger'; transforming anyway")
    return None
