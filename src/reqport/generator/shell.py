"""Render a :class:`~reqport.models.RequestDescriptor` as a POSIX curl command.

Only the POSIX dialect is produced. Arguments are wrapped in single quotes;
inside the body every single quote is written as ``'\\''`` (close, escaped
quote, reopen). Header values and the URL are emitted verbatim, so a single
quote there produces a command the shell parser cannot round-trip. Bodies
holding ``\\"`` or ``\\\\`` are not round-trippable either: the parser
unescapes those sequences, so ``"C:\\\\dir"`` comes back as ``"C:\\dir"``.
"""

from __future__ import annotations

from reqport.models import RequestDescriptor

LINE_CONTINUATION = " \\\n"
"""Separator between arguments: backslash-newline, joined back by the parser."""


def quote_posix(text: str) -> str:
    """Escape *text* for embedding inside a single-quoted POSIX argument."""
    return text.replace("'", "'\\''")


def generate_curl(request: RequestDescriptor, multiline: bool = True) -> str:
    """Build a curl command line for *request*.

    Emits ``--request <METHOD>`` and the URL, one ``--header`` per enabled
    header with a non-blank key, and ``--data-raw`` for a non-empty JSON body.
    Other body types are never emitted.

    Args:
        request: The request to render.
        multiline: Put each argument on its own line using backslash
            continuations. When ``False`` arguments are separated by a space.

    Returns:
        The command text without a trailing newline.

    Example::

        curl --location --request POST 'https://api.example.com/users' \\
        --header 'Content-Type: application/json' \\
        --data-raw '{"name": "ada"}'
    """
    method = request.method.value if request.method else "GET"
    parts = [f"curl --location --request {method} '{request.url or ''}'"]

    for row in request.enabled_headers():
        parts.append(f"--header '{row.key}: {row.value}'")

    if request.has_json_body():
        parts.append(f"--data-raw '{quote_posix(request.body_content)}'")

    return (LINE_CONTINUATION if multiline else " ").join(parts)
