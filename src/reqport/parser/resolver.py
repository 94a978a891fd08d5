"""Dereference internal ``$ref`` pointers in API description documents.

Parameter objects and request bodies are often shared through
``components`` and referenced with ``{"$ref": "#/components/..."}``. The spec
importer only needs those two kinds of object, so rather than inlining the
whole document this module follows one reference chain at a time with
:func:`dereference`.

Only **internal** references (``#/...``) are supported. Pointer segments
use RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``). A reference
chain that loops back on itself raises
:class:`~reqport.exceptions.DecodeError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from reqport.exceptions import DecodeError


def resolve_pointer(ref: str, root: Mapping[str, Any]) -> Any:
    """Return the value *ref* points at inside *root*.

    Raises:
        DecodeError: If *ref* is external or any segment does not exist.
    """
    if not ref.startswith("#/"):
        raise DecodeError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for raw_segment in ref[2:].split("/"):
        segment = raw_segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, Mapping):
            if segment not in current:
                raise DecodeError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise DecodeError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise DecodeError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )
    return current


def dereference(obj: Any, root: Mapping[str, Any]) -> Any:
    """Follow ``$ref`` pointers until *obj* is no longer a reference object.

    Non-reference values are returned unchanged. Nested references further
    down inside the result are left alone.

    Raises:
        DecodeError: On external, dangling, or circular references.
    """
    seen: set[str] = set()
    while isinstance(obj, Mapping) and "$ref" in obj:
        ref = obj["$ref"]
        if not isinstance(ref, str):
            raise DecodeError(f"Invalid $ref value: {ref!r}")
        if ref in seen:
            raise DecodeError(f"Circular $ref chain at '{ref}'")
        seen.add(ref)
        obj = resolve_pointer(ref, root)
    return obj
