"""Naming rules for sections, modules and their identifiers.

This module turns operations into human-readable module names and turns
names into URL-safe slugs:

* :func:`sanitize_id` -- lowercase, hyphenated slug of a display name.
* :func:`module_name` -- the operation-naming heuristic (summary first,
  then HTTP method + resource).
* :class:`IdAllocator` -- hands out unique slugs, appending ``-2``, ``-3``
  ... when two different names collapse to the same slug.
* :func:`section_anchor`, :func:`module_anchor`, :func:`endpoint_anchor` --
  stable HTML anchor ids for renderers.
"""

from __future__ import annotations

import re
from typing import Optional

_INVALID_ID_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")

_METHOD_VERBS: dict[str, str] = {
    "post": "Create",
    "put": "Update",
    "patch": "Update",
    "delete": "Delete",
    "head": "Head",
    "options": "Options",
}


def sanitize_id(name: str) -> str:
    """Convert a display name into a lowercase, hyphenated slug.

    Applies the following transformations in order:

    1. Lowercase.
    2. Strip everything except ``a-z``, ``0-9``, whitespace and ``-``.
    3. Collapse whitespace runs into a single hyphen.
    4. Collapse repeated hyphens.
    5. Trim leading and trailing hyphens.

    Example::

        >>> sanitize_id("List users")
        'list-users'
        >>> sanitize_id("  Users & Roles -- Admin ")
        'users-roles-admin'
    """
    result = name.lower()
    result = _INVALID_ID_RE.sub("", result)
    result = _WHITESPACE_RE.sub("-", result)
    result = _HYPHENS_RE.sub("-", result)
    return result.strip("-")


def _is_path_param(segment: str) -> bool:
    """Return ``True`` if *segment* is a path parameter (e.g., ``{id}``)."""
    return segment.startswith("{") and segment.endswith("}")


def _split_segments(path: str) -> list[str]:
    """Split a path into non-empty segments."""
    return [s for s in path.split("/") if s]


def resource_name(path: str) -> str:
    """Return the last non-parameter segment of *path*, or ``"root"``.

    Example::

        >>> resource_name("/users/{id}")
        'users'
        >>> resource_name("/")
        'root'
    """
    static = [seg for seg in _split_segments(path) if not _is_path_param(seg)]
    return static[-1] if static else "root"


def module_name(method: str, path: str, summary: Optional[str] = None) -> str:
    """Infer the module an operation belongs to.

    A non-blank ``summary`` is used as-is.  Otherwise the name is derived
    from the HTTP method and the resource segment: ``GET`` reads as
    ``Get <resource>`` when the path has a ``{...}`` parameter and as
    ``List <resource>`` otherwise; ``POST`` as ``Create``; ``PUT`` and
    ``PATCH`` as ``Update``; ``DELETE`` as ``Delete``.

    Args:
        method: HTTP method, any case.
        path: The templated path (e.g., ``"/users/{id}"``).
        summary: The operation's ``summary``, if any.

    Example::

        >>> module_name("get", "/users/{id}")
        'Get users'
        >>> module_name("GET", "/users")
        'List users'
        >>> module_name("post", "/users", summary="Sign up")
        'Sign up'
    """
    if summary and summary.strip():
        return summary.strip()

    verb = method.lower()
    resource = resource_name(path)
    if verb == "get":
        has_param = any(_is_path_param(seg) for seg in _split_segments(path))
        return f"{'Get' if has_param else 'List'} {resource}"
    return f"{_METHOD_VERBS.get(verb, verb.capitalize())} {resource}"


class IdAllocator:
    """Allocates unique slugs within one scope.

    The same name always maps to the same id.  A different name whose slug
    is already taken receives the next free numeric suffix.

    Args:
        fallback: Base slug for names that sanitize to an empty string.

    Example::

        ids = IdAllocator("module")
        ids.allocate("List users")   # 'list-users'
        ids.allocate("List-Users!")  # 'list-users-2'
        ids.allocate("List users")   # 'list-users'
    """

    def __init__(self, fallback: str) -> None:
        self._fallback = fallback
        self._by_name: dict[str, str] = {}
        self._taken: set[str] = set()

    def allocate(self, name: str) -> str:
        existing = self._by_name.get(name)
        if existing is not None:
            return existing

        base = sanitize_id(name) or self._fallback
        candidate = base
        suffix = 2
        while candidate in self._taken:
            candidate = f"{base}-{suffix}"
            suffix += 1

        self._taken.add(candidate)
        self._by_name[name] = candidate
        return candidate


def section_anchor(section_id: str) -> str:
    return f"section-{section_id}"


def module_anchor(section_id: str, module_id: str) -> str:
    return f"module-{section_id}-{module_id}"


def endpoint_anchor(section_id: str, module_id: str, method: str, path: str) -> str:
    """Anchor id for one endpoint card, unique within a rendered page."""
    safe_path = _NON_ALNUM_RE.sub("-", path)
    return f"endpoint-{section_id}-{module_id}-{method.lower()}-{safe_path}"
