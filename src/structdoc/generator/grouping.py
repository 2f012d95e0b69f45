"""Group extracted operations into sections and modules.

This is the core algorithm of structdoc.  It walks a raw OpenAPI/Swagger
document and produces the three-level tree renderers consume:
:class:`~structdoc.models.Section` (one per tag) containing
:class:`~structdoc.models.Module` (one per inferred operation intent)
containing :class:`~structdoc.models.EndpointDescriptor`.

**Algorithm summary**

1. Visit every path item in declaration order and every HTTP verb key in
   declaration order within it.
2. Extract one descriptor per operation with a shared
   :class:`~structdoc.parser.extractor.OperationExtractor`.
3. Assign the operation to each of its tags (or to the default tag),
   copying the descriptor once per tag.
4. Inside a section, operations whose module names match are merged into
   one module.
5. Allocate unique slugs for sections and modules and stamp anchors on
   every level.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from structdoc.generator.naming import (
    IdAllocator,
    endpoint_anchor,
    module_anchor,
    module_name,
    section_anchor,
)
from structdoc.models import (
    DocsConfig,
    EndpointDescriptor,
    HTTPMethod,
    Module,
    Section,
)
from structdoc.parser.examples import ExampleSynthesizer
from structdoc.parser.extractor import OperationExtractor
from structdoc.parser.resolver import SchemaResolver

logger = logging.getLogger(__name__)

_METHODS = frozenset(m.value for m in HTTPMethod)


class _SectionBuilder:
    """Accumulates modules for one tag while the document is walked."""

    def __init__(self, section_id: str, name: str, description: Optional[str]) -> None:
        self.section_id = section_id
        self.name = name
        self.description = description
        self.module_ids = IdAllocator("module")
        self.modules: dict[str, Module] = {}

    def add(self, name: str, endpoint: EndpointDescriptor) -> None:
        module = self.modules.get(name)
        if module is None:
            module_id = self.module_ids.allocate(name)
            module = Module(
                id=module_id,
                name=name,
                anchor=module_anchor(self.section_id, module_id),
            )
            self.modules[name] = module

        if module.description is None and endpoint.description:
            module.description = endpoint.description

        endpoint.anchor = endpoint_anchor(
            self.section_id, module.id, endpoint.method, endpoint.path
        )
        module.endpoints.append(endpoint)

    def build(self) -> Section:
        return Section(
            id=self.section_id,
            name=self.name,
            description=self.description,
            anchor=section_anchor(self.section_id),
            modules=list(self.modules.values()),
        )


class GroupingEngine:
    """Builds the section tree for a single document.

    One engine (and one resolver cache) serves one transformation; create
    a new engine for every document snapshot.

    Args:
        document: The raw OpenAPI/Swagger document.  Never modified.
        config: Grouping options.  Defaults to :class:`DocsConfig`.

    Example::

        sections = GroupingEngine(document).group()
        [s.name for s in sections]
        # ['Users', 'Default']
    """

    def __init__(self, document: dict[str, Any], config: Optional[DocsConfig] = None) -> None:
        self._document = document
        self._config = config or DocsConfig()
        resolver = SchemaResolver(document)
        self._extractor = OperationExtractor(resolver, ExampleSynthesizer(resolver))

    def group(self) -> list[Section]:
        """Walk ``paths`` and return the sections in first-appearance order.

        A missing or malformed ``paths`` block yields an empty list.
        """
        paths = self._document.get("paths")
        if not isinstance(paths, dict):
            logger.warning("Document has no usable 'paths' mapping; no sections built")
            return []

        tag_descriptions = self._tag_descriptions()
        section_ids = IdAllocator("section")
        builders: dict[str, _SectionBuilder] = {}

        for path, path_item in paths.items():
            if not isinstance(path_item, dict):
                logger.debug("Skipping non-mapping path item at %s", path)
                continue
            path_parameters = path_item.get("parameters")

            for method, operation in path_item.items():
                if not isinstance(method, str) or method.lower() not in _METHODS:
                    continue
                if not isinstance(operation, dict):
                    continue
                if self._config.exclude_deprecated and operation.get("deprecated") is True:
                    logger.debug("Excluding deprecated operation %s %s", method.upper(), path)
                    continue

                logger.debug("Extracting %s %s", method.upper(), path)
                endpoint = self._extractor.extract(
                    method,
                    str(path),
                    operation,
                    path_parameters if isinstance(path_parameters, list) else None,
                )
                name = module_name(method, str(path), endpoint.summary)

                for tag in self._section_tags(endpoint):
                    builder = builders.get(tag)
                    if builder is None:
                        builder = _SectionBuilder(
                            section_ids.allocate(tag), tag, tag_descriptions.get(tag)
                        )
                        builders[tag] = builder
                    builder.add(name, endpoint.model_copy(deep=True))

        return [builder.build() for builder in builders.values()]

    def _section_tags(self, endpoint: EndpointDescriptor) -> list[str]:
        """Distinct tags in declaration order, or the default tag."""
        tags: list[str] = []
        for tag in endpoint.tags:
            if tag not in tags:
                tags.append(tag)
        return tags or [self._config.default_tag]

    def _tag_descriptions(self) -> dict[str, str]:
        descriptions: dict[str, str] = {}
        raw_tags = self._document.get("tags")
        if not isinstance(raw_tags, list):
            return descriptions
        for entry in raw_tags:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name")
            description = entry.get("description")
            if isinstance(name, str) and isinstance(description, str):
                descriptions.setdefault(name, description)
        return descriptions


def group(document: dict[str, Any], config: Optional[DocsConfig] = None) -> list[Section]:
    """Group *document* into sections with a fresh engine.

    Non-mapping input yields an empty list.
    """
    if not isinstance(document, dict):
        logger.warning("Document is not a mapping; no sections built")
        return []
    return GroupingEngine(document, config).group()
