"""Assemble the complete documentation model for one document.

:func:`build_documentation` is the top-level entry point: it sniffs the
document version, reads ``info`` and the server list, runs the grouping
engine, applies the tag filter from :class:`~structdoc.models.DocsConfig`
and collects the tag list used by renderers for filtering.
:func:`documentation_to_dict` serializes the result with camelCase keys.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from structdoc.generator.grouping import GroupingEngine
from structdoc.models import DocsConfig, Documentation, Section, ServerInfo
from structdoc.parser.loader import detect_spec_version

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "API Documentation"
DEFAULT_VERSION = "1.0.0"


def build_documentation(
    document: Any, config: Optional[DocsConfig] = None
) -> Documentation:
    """Transform *document* into a :class:`~structdoc.models.Documentation`.

    The whole model is rebuilt from scratch on every call.  Malformed input
    degrades the result (fewer sections, default title) instead of raising.

    Args:
        document: The parsed OpenAPI 3.x / Swagger 2.x document.
        config: Overrides and filters.  Defaults to :class:`DocsConfig`.

    Returns:
        The documentation tree.
    """
    config = config or DocsConfig()

    if not isinstance(document, dict):
        logger.warning("Document is not a mapping; returning empty documentation")
        return Documentation(
            title=config.title or DEFAULT_TITLE,
            description=config.description,
            version=config.version or DEFAULT_VERSION,
        )

    spec_version = detect_spec_version(document)
    info = document.get("info")
    if not isinstance(info, dict):
        info = {}

    sections = GroupingEngine(document, config).group()
    if config.tags:
        wanted = set(config.tags)
        sections = [s for s in sections if s.name in wanted]

    return Documentation(
        title=config.title or _info_str(info, "title") or DEFAULT_TITLE,
        description=config.description or _info_str(info, "description"),
        version=config.version or _info_str(info, "version") or DEFAULT_VERSION,
        spec_version=spec_version,
        servers=_extract_servers(document),
        sections=sections,
        tags=_collect_tags(sections),
    )


def documentation_to_dict(doc: Documentation) -> dict[str, Any]:
    """Serialize *doc* to JSON-ready data with camelCase keys."""
    return doc.model_dump(mode="json", by_alias=True)


def _info_str(info: dict[str, Any], key: str) -> Optional[str]:
    value = info.get(key)
    if value is None:
        return None
    return str(value)


def _extract_servers(document: dict[str, Any]) -> list[ServerInfo]:
    """Extract server entries from OpenAPI 3.x ``servers`` or Swagger 2.x ``host``."""
    servers: list[ServerInfo] = []

    raw_servers = document.get("servers")
    if isinstance(raw_servers, list):
        for entry in raw_servers:
            if isinstance(entry, dict) and isinstance(entry.get("url"), str):
                description = entry.get("description")
                servers.append(
                    ServerInfo(
                        url=entry["url"],
                        description=description if isinstance(description, str) else None,
                    )
                )
        return servers

    host = document.get("host")
    if isinstance(host, str) and host:
        base_path = document.get("basePath")
        if not isinstance(base_path, str):
            base_path = ""
        schemes = document.get("schemes")
        if not isinstance(schemes, list) or not schemes:
            schemes = ["https"]
        for scheme in schemes:
            servers.append(ServerInfo(url=f"{scheme}://{host}{base_path}"))

    return servers


def _collect_tags(sections: list[Section]) -> list[str]:
    tags: set[str] = set()
    for section in sections:
        for module in section.modules:
            for endpoint in module.endpoints:
                tags.update(endpoint.tags)
    return sorted(tags)
