"""Read documents and command text from a file, a URL, or stdin.

This is the only module in the parser package that performs I/O. The
converters themselves (:mod:`~reqport.parser.shell`,
:mod:`~reqport.parser.openapi`, :mod:`reqport.collection`) accept
already-loaded values, so the CLI calls into this module first.

* :func:`read_text` -- raw text (a pasted shell command, a request file).
* :func:`load_document` -- a JSON or YAML object (collection, spec, request
  or environment file), with format detection from the file extension, the
  response content type, or the content itself.
* :func:`load_requests` -- a request, collection, or API description file
  as a flat list of titled requests.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import ValidationError

from reqport.exceptions import DecodeError
from reqport.models import ImportedRequest, RequestDescriptor


def read_text(source: str) -> str:
    """Return the text of *source*: a URL, a file path, or ``-`` for stdin.

    Raises:
        DecodeError: If the source cannot be read or is empty.
    """
    if source == "-":
        try:
            content = sys.stdin.read()
        except OSError as exc:
            raise DecodeError(f"Failed to read from stdin: {exc}") from exc
        label = "stdin"
    elif source.startswith(("http://", "https://")):
        content, _ = _fetch(source)
        label = source
    else:
        content = _read_file(Path(source))
        label = source

    if not content.strip():
        raise DecodeError(f"No input received from {label}")
    return content


def load_document(source: str) -> dict[str, Any]:
    """Load a JSON or YAML object from a URL, a file path, or ``-`` for stdin.

    Raises:
        DecodeError: If the source cannot be read, is empty, cannot be parsed,
            or does not contain an object at the top level.
    """
    hint = ""
    if source == "-":
        content = read_text(source)
    elif source.startswith(("http://", "https://")):
        content, content_type = _fetch(source)
        if "json" in content_type:
            hint = "json"
        elif "yaml" in content_type or "yml" in content_type:
            hint = "yaml"
    else:
        path = Path(source)
        content = _read_file(path)
        suffix = path.suffix.lower()
        if suffix == ".json":
            hint = "json"
        elif suffix in (".yaml", ".yml"):
            hint = "yaml"

    if not content.strip():
        raise DecodeError(f"Document is empty: {source}")
    return parse_document(content, hint=hint)


def _read_file(path: Path) -> str:
    if not path.is_file():
        raise DecodeError(f"File not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DecodeError(f"Failed to read {path}: {exc}") from exc


def _fetch(url: str) -> tuple[str, str]:
    """GET *url* and return ``(body_text, content_type)``."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DecodeError(
            f"HTTP {exc.response.status_code} fetching {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DecodeError(f"Failed to fetch {url}: {exc}") from exc
    return response.text, response.headers.get("content-type", "")


def parse_document(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON, falling back to YAML.

    A ``"json"`` hint disables the YAML fallback; a ``"yaml"`` hint skips
    JSON.

    Raises:
        DecodeError: If neither parser accepts the content, or the top-level
            value is not an object.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _require_object(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise DecodeError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _require_object(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise DecodeError(
        "Failed to parse document as JSON or YAML\n  " + "\n  ".join(errors)
    )


def _require_object(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        kind = type(value).__name__ if value is not None else "empty document"
        raise DecodeError(f"Document must be a JSON/YAML object (got {kind})")
    return value


def load_requests(source: str) -> list[ImportedRequest]:
    """Load every request described by *source*.

    The document kind is recognised from its top-level keys: a collection
    (``info`` and ``item``), an API description (``paths``), or a single
    request object in the :class:`~reqport.models.RequestDescriptor` wire
    shape, optionally wrapped as ``{"title": ..., "request": {...}}``.

    Raises:
        DecodeError: If the source cannot be loaded or has none of the
            recognised shapes.
    """
    from reqport.collection import import_collection
    from reqport.parser.openapi import import_spec

    doc = load_document(source)
    if "item" in doc and "info" in doc:
        return import_collection(doc)
    if "paths" in doc:
        return import_spec(doc)

    try:
        if "request" in doc:
            return [ImportedRequest.model_validate(doc)]
        request = RequestDescriptor.model_validate(doc)
    except ValidationError as exc:
        raise DecodeError(f"Invalid request document {source}: {exc}") from exc
    title = request.title or Path(source).stem
    return [ImportedRequest(title=title, request=request)]
