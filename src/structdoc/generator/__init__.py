"""Section/module tree generation from OpenAPI documents.

This sub-package turns a raw document into the
:class:`~structdoc.models.Section` tree consumed by renderers.

Typical usage::

    from structdoc.generator import group

    sections = group(document)
    for section in sections:
        print(section.id, [m.name for m in section.modules])

Sub-modules:

* :mod:`~structdoc.generator.grouping` -- the tag / module grouping engine.
* :mod:`~structdoc.generator.naming` -- slugs, module-name heuristic and
  anchor ids.
"""

from structdoc.generator.grouping import GroupingEngine, group
from structdoc.generator.naming import IdAllocator, module_name, sanitize_id

__all__ = [
    "GroupingEngine",
    "IdAllocator",
    "group",
    "module_name",
    "sanitize_id",
]
