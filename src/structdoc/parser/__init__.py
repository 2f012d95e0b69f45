"""OpenAPI document parser -- resolve schemas, synthesize examples, extract operations.

This sub-package is responsible for the first half of the structdoc pipeline:
turning one raw OpenAPI 3.x or Swagger 2.x operation into a fully resolved
:class:`~structdoc.models.EndpointDescriptor` that the grouping engine can
place into sections and modules.

Typical usage::

    from structdoc.parser import extract_operation, load_document

    document = load_document("openapi.yaml")
    endpoint = extract_operation("get", "/users", document["paths"]["/users"]["get"], document)

Sub-modules:

* :mod:`~structdoc.parser.loader` -- file/stdin reading, JSON/YAML parsing
  and version sniffing.
* :mod:`~structdoc.parser.schema` -- raw node to schema variant conversion.
* :mod:`~structdoc.parser.resolver` -- ``$ref`` lookup and ``allOf`` /
  ``oneOf`` / ``anyOf`` flattening.
* :mod:`~structdoc.parser.examples` -- cycle-safe example synthesis.
* :mod:`~structdoc.parser.extractor` -- per-operation endpoint extraction.
"""

from structdoc.parser.examples import ExampleSynthesizer, synthesize
from structdoc.parser.extractor import OperationExtractor, extract_operation
from structdoc.parser.loader import detect_spec_version, load_document, parse_document
from structdoc.parser.resolver import SchemaResolver, resolve
from structdoc.parser.schema import parse_schema

__all__ = [
    "ExampleSynthesizer",
    "OperationExtractor",
    "SchemaResolver",
    "detect_spec_version",
    "extract_operation",
    "load_document",
    "parse_document",
    "parse_schema",
    "resolve",
    "synthesize",
]
