"""Convert between requests and hierarchical collection documents.

The document format is the Postman collection v2.1 shape: an ``info`` block
plus a tree of ``item`` nodes, where a node carrying a ``request`` is a leaf
and any other node is a folder.

**Import** (:func:`import_collection`) validates the whole document into
:class:`~reqport.models.CollectionDocument` first, then walks it pre-order,
depth-first. Folder structure is discarded; requests come out flattened in
traversal order. The import is atomic: a malformed document raises
:class:`~reqport.exceptions.DecodeError` and nothing is returned.

**Export** (:func:`export_collection`) writes a flat v2.1 document. It is
intentionally lossy: disabled or blank-key rows and non-JSON bodies are
dropped.

What survives an export/import round trip: method, URL, enabled headers,
enabled query parameters, and JSON body content.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Collection, Iterable, Iterator, Mapping, Sequence
from typing import Any, Union
from urllib.parse import parse_qsl

from pydantic import ValidationError

from reqport.exceptions import DecodeError
from reqport.models import (
    BodyMode,
    BodyType,
    CollectionDocument,
    CollectionFolder,
    CollectionKeyValue,
    CollectionRequestItem,
    CollectionUrl,
    ImportedRequest,
    KeyValueRow,
    RequestDescriptor,
)

logger = logging.getLogger(__name__)

SCHEMA_URL = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"
DEFAULT_COLLECTION_NAME = "reqport export"
DEFAULT_TITLE = "Imported Request"


# --- Import ---


def import_collection(doc: Mapping[str, Any]) -> list[ImportedRequest]:
    """Flatten a collection document into titled requests.

    Args:
        doc: The parsed collection document.

    Returns:
        Every leaf request in pre-order, depth-first traversal order.

    Raises:
        DecodeError: If *doc* does not have the collection shape. This
            includes any request whose method is outside
            :class:`~reqport.models.HTTPMethod` (``PURGE``, ``COPY``, ...):
            one such item fails the whole import.
    """
    if not isinstance(doc, Mapping):
        raise DecodeError(
            f"Collection must be an object (got {type(doc).__name__})"
        )
    try:
        collection = CollectionDocument.model_validate(doc)
    except ValidationError as exc:
        raise DecodeError(f"Invalid collection document: {exc}") from exc

    imported = [_import_item(item) for item in iter_request_items(collection.item)]
    logger.debug(
        "imported %d requests from collection %r", len(imported), collection.info.name
    )
    return imported


def iter_request_items(
    nodes: Iterable[Union[CollectionRequestItem, CollectionFolder]],
) -> Iterator[CollectionRequestItem]:
    """Yield request leaves of *nodes* in pre-order, depth-first order."""
    for node in nodes:
        if isinstance(node, CollectionRequestItem):
            yield node
        else:
            yield from iter_request_items(node.item)


def _import_item(item: CollectionRequestItem) -> ImportedRequest:
    source = item.request

    query_params: list[KeyValueRow] = []
    if isinstance(source.url, CollectionUrl):
        url = source.url.raw or synthesize_url(source.url)
        query_params = [_row(entry) for entry in source.url.query]
    else:
        url = source.url or ""

    if not query_params and "?" in url:
        query_params = query_rows_from_url(url)

    if source.body is None:
        body_type, body_content = BodyType.NONE, ""
    elif source.body.mode == BodyMode.RAW:
        body_type, body_content = BodyType.JSON, source.body.raw
    elif source.body.mode == BodyMode.FORMDATA:
        body_type = BodyType.FORM_DATA
        body_content = json.dumps(source.body.formdata, separators=(",", ":"))
    else:
        body_type, body_content = BodyType.NONE, ""

    title = item.name or DEFAULT_TITLE
    request = RequestDescriptor(
        method=source.method,
        url=url,
        query_params=tuple(query_params),
        headers=tuple(_row(entry) for entry in source.header),
        body_type=body_type,
        body_content=body_content,
        title=title,
    )
    return ImportedRequest(title=title, request=request)


def _row(entry: CollectionKeyValue) -> KeyValueRow:
    return KeyValueRow(
        key=entry.key,
        value=entry.value,
        description=entry.description,
        enabled=not entry.disabled,
    )


def synthesize_url(url: CollectionUrl) -> str:
    """Rebuild a URL string from structured parts.

    ``protocol://`` and ``:port`` are only written when present; host parts
    are joined with dots and path parts with slashes.
    """
    protocol = f"{url.protocol}://" if url.protocol else ""
    host = ".".join(url.host)
    port = f":{url.port}" if url.port else ""
    path = "/".join(url.path)
    if path and not path.startswith("/"):
        path = "/" + path
    return f"{protocol}{host}{port}{path}"


def query_rows_from_url(url: str) -> list[KeyValueRow]:
    """Parse the query string of *url* into enabled rows, in order.

    Works on template URLs such as ``{{host}}/users?page={{page}}`` because
    only the text after the first ``?`` (and before any ``#``) is examined.
    """
    query = url.split("?", 1)[1].split("#", 1)[0]
    return [
        KeyValueRow(key=key, value=value)
        for key, value in parse_qsl(query, keep_blank_values=True)
    ]


# --- Export ---


def export_collection(
    requests: Sequence[Union[ImportedRequest, RequestDescriptor]],
    selection: Collection[str] | None = None,
    name: str = DEFAULT_COLLECTION_NAME,
) -> dict[str, Any]:
    """Build a collection document from *requests*.

    Args:
        requests: Requests to export. :class:`~reqport.models.ImportedRequest`
            entries are matched against *selection* by ``id``; bare
            descriptors by ``title``.
        selection: Identifiers to export. ``None`` or empty exports
            everything. Matching requests keep their relative order.
        name: The collection name written to ``info.name``.

    Returns:
        A JSON-serialisable collection document.
    """
    items: list[dict[str, Any]] = []
    for entry in requests:
        if isinstance(entry, ImportedRequest):
            identifier, title, request = entry.id, entry.title, entry.request
        else:
            identifier = title = entry.title
            request = entry
        if selection and identifier not in selection:
            continue
        items.append(_export_item(title, request))

    logger.debug("exported %d of %d requests", len(items), len(requests))
    return {"info": {"name": name, "schema": SCHEMA_URL}, "item": items}


def _export_item(title: str, request: RequestDescriptor) -> dict[str, Any]:
    url: dict[str, Any] = {"raw": request.url}
    params = request.enabled_query_params()
    if params:
        url["query"] = [{"key": row.key, "value": row.value} for row in params]

    exported: dict[str, Any] = {
        "method": request.method.value,
        "header": [
            {"key": row.key, "value": row.value, "type": "text"}
            for row in request.enabled_headers()
        ],
    }
    if request.body_type == BodyType.JSON:
        exported["body"] = {
            "mode": "raw",
            "raw": request.body_content,
            "options": {"raw": {"language": "json"}},
        }
    exported["url"] = url
    return {"name": title, "request": exported}


__all__ = [
    "export_collection",
    "import_collection",
    "iter_request_items",
    "query_rows_from_url",
    "synthesize_url",
]
