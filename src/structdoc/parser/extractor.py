"""Extract endpoint descriptors from OpenAPI operations.

:class:`OperationExtractor` takes one operation object (a path + HTTP method
pair) and produces a fully resolved
:class:`~structdoc.models.EndpointDescriptor`: parameters with examples,
the request body example, the chosen success response and one
:class:`~structdoc.models.ErrorDescriptor` per declared error status.

Schema work is delegated to :class:`~structdoc.parser.resolver.SchemaResolver`
and :class:`~structdoc.parser.examples.ExampleSynthesizer`.  Every root
synthesis call starts with its own empty ``visiting`` set.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they
share the same ``name`` and ``in`` values.

Both OpenAPI 3.x (``requestBody`` / ``content``) and Swagger 2.x (``in:
body`` parameters, response-level ``schema`` / ``examples``) shapes are
understood.  Malformed fragments are skipped, never raised.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from structdoc.exceptions import ReferenceNotFoundError
from structdoc.models import (
    EndpointDescriptor,
    ErrorDescriptor,
    Parameter,
    ParameterLocation,
    SchemaNode,
)
from structdoc.parser.examples import ExampleSynthesizer
from structdoc.parser.resolver import SchemaResolver
from structdoc.parser.schema import parse_schema

logger = logging.getLogger(__name__)

_JSON_MEDIA_TYPE = "application/json"
_PREFERRED_SUCCESS = ("200", "201", "202", "204")
_NUMERIC_SUCCESS_RE = re.compile(r"^2\d\d$")
_NUMERIC_STATUS_RE = re.compile(r"^\d{3}$")
_AUTH_NAME_MARKERS = ("auth", "token", "key")

# Swagger 2.x non-body parameters declare their schema inline.
_INLINE_SCHEMA_KEYS = ("type", "format", "enum", "items", "example")


class OperationExtractor:
    """Builds :class:`~structdoc.models.EndpointDescriptor` objects for one document.

    Args:
        resolver: Resolver bound to the document.
        synthesizer: Synthesizer sharing the same resolver.
    """

    def __init__(self, resolver: SchemaResolver, synthesizer: ExampleSynthesizer) -> None:
        self._resolver = resolver
        self._synthesizer = synthesizer

    @property
    def document(self) -> dict[str, Any]:
        return self._resolver.document

    def extract(
        self,
        method: str,
        path: str,
        operation: dict[str, Any],
        path_parameters: Optional[list[Any]] = None,
    ) -> EndpointDescriptor:
        """Extract the descriptor for a single operation.

        Args:
            method: HTTP method (any case).
            path: The templated path (e.g., ``"/users/{id}"``).
            operation: The raw operation object from the path item.
            path_parameters: The path item's ``parameters`` list, merged
                under the operation's own parameters.

        Returns:
            A descriptor with ``method`` upper-cased and ``tags`` copied
            from the operation.  Grouping fills in ``anchor`` later.
        """
        raw_params = _merge_parameters(
            self._deref_list(path_parameters or []),
            self._deref_list(_as_list(operation.get("parameters"))),
        )
        parameters = self._extract_parameters(raw_params)
        request_example = self._request_example(operation, raw_params)
        responses = self._deref(operation.get("responses"))
        if not isinstance(responses, dict):
            responses = {}

        success_status, success_response = _select_success(responses)
        success_response = self._deref(success_response)
        success_example = None
        success_description = None
        if isinstance(success_response, dict):
            success_description = _as_str(success_response.get("description"))
            success_example = self._response_example(success_response)

        summary = operation.get("summary")
        tags = [str(t) for t in _as_list(operation.get("tags"))]

        return EndpointDescriptor(
            method=method.upper(),
            path=path,
            summary=summary.strip() if isinstance(summary, str) else "",
            description=_as_str(operation.get("description")),
            operation_id=_as_str(operation.get("operationId")),
            deprecated=operation.get("deprecated") is True,
            requires_auth=self._requires_auth(operation, parameters),
            tags=tags,
            parameters=parameters,
            request_headers={
                p.name: p.example for p in parameters if p.location == ParameterLocation.HEADER
            },
            request_example=request_example,
            success_status=success_status,
            success_description=success_description,
            success_example=success_example,
            error_responses=self._extract_errors(responses),
        )

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def _requires_auth(self, operation: dict[str, Any], parameters: list[Parameter]) -> bool:
        """Decide whether the operation needs credentials.

        Operation-level ``security`` replaces the global one, and an explicit
        empty list means no auth.  Parameters named like credentials
        (``auth``, ``token``, ``key``, ``Authorization``) also count.
        """
        op_security = operation.get("security")
        if op_security is not None:
            if isinstance(op_security, list) and op_security:
                return True
        else:
            global_security = self.document.get("security")
            if isinstance(global_security, list) and global_security:
                return True

        for param in parameters:
            lowered = param.name.lower()
            if lowered == "authorization" or any(m in lowered for m in _AUTH_NAME_MARKERS):
                return True
        return False

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def _extract_parameters(self, raw_params: list[dict[str, Any]]) -> list[Parameter]:
        """Convert raw parameter dicts into :class:`~structdoc.models.Parameter` models.

        Parameters with unrecognised ``in`` locations are skipped.  Path
        parameters are always required regardless of the ``required`` field.
        """
        parameters: list[Parameter] = []

        for param in raw_params:
            name = param.get("name")
            if not isinstance(name, str):
                continue
            try:
                location = ParameterLocation(param.get("in", "query"))
            except (ValueError, TypeError):
                logger.debug("Skipping parameter '%s' with location %r", name, param.get("in"))
                continue

            schema = parse_schema(_parameter_schema(param))
            if "example" in param:
                example = param["example"]
            elif isinstance(param.get("examples"), dict) and param["examples"]:
                example = self._first_named_example(param["examples"], schema)
            else:
                example = self._synthesizer.synthesize(schema)

            required = param.get("required") is True or location == ParameterLocation.PATH

            parameters.append(
                Parameter(
                    name=name,
                    location=location,
                    required=required,
                    description=_as_str(param.get("description")),
                    schema_=schema,
                    example=example,
                )
            )

        return parameters

    # ------------------------------------------------------------------
    # Bodies
    # ------------------------------------------------------------------

    def _request_example(
        self, operation: dict[str, Any], raw_params: list[dict[str, Any]]
    ) -> Any:
        """Example for the JSON request body, or ``None`` when there is none."""
        body = self._deref(operation.get("requestBody"))
        if isinstance(body, dict):
            media = _json_media(body.get("content"))
            if media is not None:
                return self._media_example(media)
            return None

        # Swagger 2.x: the body is a parameter.
        for param in raw_params:
            if param.get("in") == ParameterLocation.BODY.value:
                if "example" in param:
                    return param["example"]
                return self._synthesizer.synthesize(parse_schema(param.get("schema")))
        return None

    def _response_example(self, response: dict[str, Any]) -> Any:
        media = _json_media(response.get("content"))
        if media is not None:
            return self._media_example(media)

        # Swagger 2.x response shape.
        examples = response.get("examples")
        if isinstance(examples, dict) and _JSON_MEDIA_TYPE in examples:
            return examples[_JSON_MEDIA_TYPE]
        if isinstance(response.get("schema"), dict):
            return self._synthesizer.synthesize(parse_schema(response["schema"]))
        return None

    def _media_example(self, media: dict[str, Any]) -> Any:
        """Example for a media-type object: ``example``, ``examples``, then schema."""
        if "example" in media:
            return media["example"]

        schema = media.get("schema")
        examples = media.get("examples")
        if isinstance(examples, dict) and examples:
            return self._first_named_example(examples, parse_schema(schema))

        if schema is None:
            return None
        return self._synthesizer.synthesize(parse_schema(schema))

    def _first_named_example(self, examples: dict[str, Any], schema: SchemaNode) -> Any:
        """Value of the first Example Object in an ``examples`` map.

        Entries without a ``value`` (e.g. ``externalValue`` only) are
        skipped; with none usable, *schema* is synthesized instead.
        """
        for entry in examples.values():
            entry = self._deref(entry)
            if isinstance(entry, dict) and "value" in entry:
                return entry["value"]
        return self._synthesizer.synthesize(schema)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _extract_errors(self, responses: dict[str, Any]) -> list[ErrorDescriptor]:
        """One descriptor per numeric status >= 400, in ascending order."""
        numeric: list[tuple[int, Any]] = []
        for key, response in responses.items():
            if not _NUMERIC_STATUS_RE.match(str(key)):
                continue
            status = int(str(key))
            if status >= 400:
                numeric.append((status, response))

        errors: list[ErrorDescriptor] = []
        for status, response in sorted(numeric, key=lambda item: item[0]):
            response = self._deref(response)
            if not isinstance(response, dict):
                response = {}
            description = _as_str(response.get("description"))
            payload = self._response_example(response)

            message = None
            error = None
            if isinstance(payload, dict):
                if isinstance(payload.get("message"), str):
                    message = payload["message"]
                if isinstance(payload.get("error"), str):
                    error = payload["error"]

            errors.append(
                ErrorDescriptor(
                    status=status,
                    description=description,
                    message=message or description or f"Error {status}",
                    error=error,
                    example=payload,
                )
            )

        return errors

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _deref(self, value: Any) -> Any:
        """Follow a non-schema ``$ref`` (parameter, body, response, example).

        Unresolvable references are logged and become ``None``.
        """
        seen: set[str] = set()
        while isinstance(value, dict) and isinstance(value.get("$ref"), str):
            ref = value["$ref"]
            if ref in seen:
                logger.warning("Reference cycle through '%s'; ignoring it", ref)
                return None
            seen.add(ref)
            try:
                value = self._resolver.lookup_raw(ref)
            except ReferenceNotFoundError as exc:
                logger.warning("Ignoring unresolvable reference: %s", exc)
                return None
        return value

    def _deref_list(self, items: list[Any]) -> list[dict[str, Any]]:
        """Dereference parameter entries, dropping those without a usable name or location."""
        result = []
        for item in items:
            item = self._deref(item)
            if not isinstance(item, dict):
                continue
            if not isinstance(item.get("name"), str) or not isinstance(item.get("in", ""), str):
                logger.debug("Skipping malformed parameter %r", item)
                continue
            result.append(item)
        return result


def extract_operation(
    method: str,
    path: str,
    operation: dict[str, Any],
    document: dict[str, Any],
) -> EndpointDescriptor:
    """Extract one operation with a throwaway resolver for *document*.

    Convenience wrapper for callers handling a single operation; the
    grouping engine shares one :class:`OperationExtractor` per build
    instead.  Path-level parameters for *path* are merged in when the
    document declares them.
    """
    resolver = SchemaResolver(document)
    extractor = OperationExtractor(resolver, ExampleSynthesizer(resolver))
    paths = document.get("paths")
    path_item = paths.get(path) if isinstance(paths, dict) else None
    path_parameters = path_item.get("parameters") if isinstance(path_item, dict) else None
    return extractor.extract(method, path, operation, _as_list(path_parameters))


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field), as OpenAPI prescribes.
    """
    op_keys = {(p.get("name", ""), p.get("in", "")) for p in op_params}
    merged = [p for p in path_params if (p.get("name", ""), p.get("in", "")) not in op_keys]
    merged.extend(op_params)
    return merged


def _parameter_schema(param: dict[str, Any]) -> Any:
    """The raw schema for a parameter, inline Swagger 2.x fields included."""
    if isinstance(param.get("schema"), dict):
        return param["schema"]
    return {key: param[key] for key in _INLINE_SCHEMA_KEYS if key in param}


def _select_success(responses: dict[str, Any]) -> tuple[int, Optional[dict[str, Any]]]:
    """Choose the success response.

    Preference: ``200``, ``201``, ``202``, ``204``; then any other ``2xx``
    code in ascending order; then a literal ``2XX`` range key.  With none
    present the status defaults to 200 and there is no response object.
    """
    keys = {str(k): k for k in responses}

    chosen: Optional[str] = None
    for code in _PREFERRED_SUCCESS:
        if code in keys:
            chosen = code
            break
    if chosen is None:
        numeric = sorted((k for k in keys if _NUMERIC_SUCCESS_RE.match(k)), key=int)
        if numeric:
            chosen = numeric[0]
    if chosen is None:
        for k in keys:
            if k.upper() == "2XX":
                response = responses[keys[k]]
                return 200, response if isinstance(response, dict) else None
        return 200, None

    response = responses[keys[chosen]]
    return int(chosen), response if isinstance(response, dict) else None


def _json_media(content: Any) -> Optional[dict[str, Any]]:
    """Pick the ``application/json`` entry from a ``content`` map, if any."""
    if not isinstance(content, dict):
        return None
    for media_type, media in content.items():
        base = str(media_type).split(";", 1)[0].strip().lower()
        if base == _JSON_MEDIA_TYPE and isinstance(media, dict):
            return media
    return None


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None
