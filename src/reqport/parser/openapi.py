"""Import requests from an API description document (OpenAPI 3.x shape).

One request is produced per path and HTTP method, in document order. The
conversion is one-way and deliberately shallow:

* ``title`` is the operation summary, else its ``operationId``, else
  ``"<METHOD> <path>"``.
* ``url`` is ``servers[0].url`` concatenated directly with the path; no
  slash de-duplication and no path-parameter substitution.
* Parameters are the path-level list followed by the operation-level list.
  Neither overrides the other, so a name can appear twice. ``query``
  parameters become query rows, ``header`` parameters become header rows,
  every other location is dropped.
* A request body declaring an ``application/json`` media type becomes a JSON
  body with the placeholder ``{}``; anything else means no body.

``$ref`` parameter objects and request bodies are dereferenced first via
:func:`~reqport.parser.resolver.dereference`.

The single public entry point is :func:`import_spec`. It is atomic: it
returns the complete list or raises
:class:`~reqport.exceptions.DecodeError`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from reqport.exceptions import DecodeError
from reqport.models import (
    BodyType,
    HTTPMethod,
    ImportedRequest,
    KeyValueRow,
    ParameterLocation,
    RequestDescriptor,
    SpecDocument,
    SpecOperation,
    SpecParameter,
)
from reqport.parser.resolver import dereference

logger = logging.getLogger(__name__)

_OPERATION_METHODS = frozenset(
    {"get", "post", "put", "delete", "patch", "options", "head"}
)

JSON_MEDIA_TYPE = "application/json"
PLACEHOLDER_BODY = "{}"


def import_spec(doc: Mapping[str, Any]) -> list[ImportedRequest]:
    """Convert an API description document into titled requests.

    Args:
        doc: The parsed document, e.g. from
            :func:`~reqport.parser.loader.load_document`.

    Returns:
        One :class:`~reqport.models.ImportedRequest` per operation.

    Raises:
        DecodeError: If the document, a path item, an operation, or a
            parameter does not have the expected shape, or a ``$ref`` cannot
            be resolved.

    Example::

        doc = {
            "servers": [{"url": "https://api.example.com"}],
            "paths": {"/users/{id}": {"get": {}}},
        }
        [item] = import_spec(doc)
        item.title        # 'GET /users/{id}'
        item.request.url  # 'https://api.example.com/users/{id}'
    """
    if not isinstance(doc, Mapping):
        raise DecodeError(
            f"Spec document must be an object (got {type(doc).__name__})"
        )
    try:
        spec = SpecDocument.model_validate(doc)
    except ValidationError as exc:
        raise DecodeError(f"Invalid spec document: {exc}") from exc

    imported: list[ImportedRequest] = []
    for path, path_item in spec.paths.items():
        path_params = _parameters(path_item.get("parameters"), doc, path)

        for key, raw_operation in path_item.items():
            if key.lower() not in _OPERATION_METHODS:
                continue
            operation = _operation(raw_operation, doc, f"{key.upper()} {path}")
            imported.append(
                _build_request(
                    spec.base_url,
                    path,
                    HTTPMethod(key.upper()),
                    operation,
                    path_params + operation.parameters,
                )
            )

    logger.debug("imported %d operations from spec", len(imported))
    return imported


def _parameters(
    raw: Any, root: Mapping[str, Any], where: str
) -> list[SpecParameter]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DecodeError(f"Parameters of {where} must be a list")
    try:
        return [SpecParameter.model_validate(dereference(p, root)) for p in raw]
    except ValidationError as exc:
        raise DecodeError(f"Invalid parameter in {where}: {exc}") from exc


def _operation(raw: Any, root: Mapping[str, Any], where: str) -> SpecOperation:
    if not isinstance(raw, Mapping):
        raise DecodeError(f"Operation {where} must be an object")
    resolved = dict(raw)
    resolved["parameters"] = [
        dereference(p, root) for p in _as_list(raw.get("parameters"), where)
    ]
    if raw.get("requestBody") is not None:
        resolved["requestBody"] = dereference(raw["requestBody"], root)
    try:
        return SpecOperation.model_validate(resolved)
    except ValidationError as exc:
        raise DecodeError(f"Invalid operation {where}: {exc}") from exc


def _as_list(raw: Any, where: str) -> list[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DecodeError(f"Parameters of {where} must be a list")
    return raw


def _build_request(
    base_url: str,
    path: str,
    method: HTTPMethod,
    operation: SpecOperation,
    parameters: list[SpecParameter],
) -> ImportedRequest:
    query_params: list[KeyValueRow] = []
    headers: list[KeyValueRow] = []
    for param in parameters:
        row = KeyValueRow(key=param.name, description=param.description)
        if param.location == ParameterLocation.QUERY:
            query_params.append(row)
        elif param.location == ParameterLocation.HEADER:
            headers.append(row)

    body_type = BodyType.NONE
    body_content = ""
    if operation.request_body and JSON_MEDIA_TYPE in operation.request_body.content:
        body_type = BodyType.JSON
        body_content = PLACEHOLDER_BODY

    title = (
        operation.summary
        or operation.operation_id
        or f"{method.value} {path}"
    )
    request = RequestDescriptor(
        method=method,
        url=base_url + path,
        query_params=tuple(query_params),
        headers=tuple(headers),
        body_type=body_type,
        body_content=body_content,
        tags=frozenset(operation.tags),
        title=title,
    )
    return ImportedRequest(title=title, request=request)
