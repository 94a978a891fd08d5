"""Parse pasted shell commands (curl or PowerShell) into a request fragment.

Three dialects are recognised from the command text alone; there is no
dialect flag:

* **PowerShell** -- ``Invoke-WebRequest`` or its ``iwr`` alias. Lines ending
  in a backtick are joined and the ``-Uri``, ``-Method``, ``-Headers @{...}``
  and ``-Body`` arguments are pulled out with regular expressions.
* **Windows cmd** -- curl with caret escapes (``curl ^"...``), as produced by
  a browser's "copy as cURL (cmd)". Caret line continuations are joined and
  every caret escape is removed (twice, for ``^\\^"`` sequences).
* **POSIX** -- everything else. Backslash line continuations are joined.

The curl dialects share a quote-aware tokenizer and a positional flag
interpreter. Parsing is lenient: an unterminated quote swallows the rest of
the input, unknown flags are skipped, and an empty URL is a valid result.

The single public entry point is :func:`parse_command`.
"""

from __future__ import annotations

import logging
import re

from reqport.models import Dialect, RequestFragment

logger = logging.getLogger(__name__)

_QUOTES = ("'", '"')

_METHOD_FLAGS = frozenset({"-X", "--request"})
_HEADER_FLAGS = frozenset({"-H", "--header"})
_DATA_FLAGS = frozenset({"-d", "--data", "--data-raw", "--data-binary"})

# How generate_curl embeds a single quote inside a single-quoted argument.
_POSIX_QUOTE_ESCAPE = "'\\''"

_PS_URI = re.compile(r"-Uri\s+[\"']?([^\"'\s]+)[\"']?", re.IGNORECASE)
_PS_METHOD = re.compile(r"-Method\s+[\"']?(\w+)[\"']?", re.IGNORECASE)
_PS_HEADERS = re.compile(r"-Headers\s+@\{([\s\S]+?)\}", re.IGNORECASE)
_PS_HEADER_PAIR = re.compile(
    r"[\"']?([^\"'\s=]+)[\"']?\s*=\s*[\"']?([^\"'\r\n]+)[\"']?"
)
_PS_BODY = re.compile(r"-Body\s+[\"']([\s\S]+?)[\"'](?:\s+|$)", re.IGNORECASE)


def parse_command(raw_text: str) -> RequestFragment:
    """Parse a curl or PowerShell command line into a :class:`RequestFragment`.

    Args:
        raw_text: The command as pasted, possibly spanning several lines.

    Returns:
        The extracted fragment. Defaults are method ``GET``, no headers, no
        body, and an empty URL.

    Example::

        >>> frag = parse_command("curl -X POST https://x/y -H 'A: B' -d '{\\"k\\":1}'")
        >>> frag.method, frag.url, frag.headers, frag.body
        ('POST', 'https://x/y', {'A': 'B'}, '{"k":1}')
    """
    dialect = detect_dialect(raw_text)
    command = normalize_lines(raw_text, dialect)
    logger.debug("parsing %s command (%d chars)", dialect.value, len(command))

    if dialect == Dialect.POWERSHELL:
        return _parse_powershell(command)
    return _parse_curl(tokenize(command), dialect)


def detect_dialect(raw_text: str) -> Dialect:
    """Infer the shell dialect from markers in *raw_text*.

    Absence of any marker silently selects :attr:`Dialect.POSIX`.
    """
    flat = re.sub(r"\r?\n", " ", raw_text)
    if (
        "Invoke-WebRequest" in flat
        or " iwr " in flat
        or flat.lstrip().startswith("iwr ")
    ):
        return Dialect.POWERSHELL
    if 'curl ^"' in flat or "curl ^%" in flat:
        return Dialect.WINDOWS
    return Dialect.POSIX


def normalize_lines(raw_text: str, dialect: Dialect) -> str:
    """Join continuation lines for *dialect* and strip the result.

    The Windows dialect additionally drops caret escapes: ``^x`` becomes
    ``x``, applied twice so doubly escaped carets resolve as well.
    """
    if dialect == Dialect.POWERSHELL:
        return re.sub(r"`\r?\n", " ", raw_text).strip()
    if dialect == Dialect.WINDOWS:
        text = re.sub(r"\^\r?\n", " ", raw_text).strip()
        for _ in range(2):
            text = re.sub(r"\^(.)", r"\1", text)
        return text
    return re.sub(r"\\\r?\n", " ", raw_text).strip()


def tokenize(command: str) -> list[str]:
    """Split *command* on spaces that are outside quotes.

    A single or double quote opens a quoted run unless it is preceded by a
    backslash; only the same quote character closes it. Quote characters are
    kept in the token so the flag interpreter can strip them. An unterminated
    quote absorbs the remainder of the input into the current token.
    """
    tokens: list[str] = []
    current: list[str] = []
    quote: str | None = None

    for index, char in enumerate(command):
        escaped = index > 0 and command[index - 1] == "\\"
        if char in _QUOTES and not escaped:
            if quote is None:
                quote = char
            elif char == quote:
                quote = None
            current.append(char)
        elif char == " " and quote is None:
            if current:
                tokens.append("".join(current))
            current = []
        else:
            current.append(char)

    if current:
        tokens.append("".join(current))
    return tokens


def _strip_quotes(token: str) -> str:
    """Remove one leading and one trailing quote character, independently."""
    return re.sub(r"^[\"']|[\"']$", "", token)


def _strip_body_quotes(token: str) -> str:
    if token[:1] in _QUOTES:
        if len(token) >= 2 and token[-1] == token[0]:
            return token[1:-1]
        return token[1:]
    return token


def _parse_curl(tokens: list[str], dialect: Dialect) -> RequestFragment:
    """Interpret curl *tokens* positionally.

    A data flag forces the method to ``POST`` even when ``-X`` chose another
    verb, regardless of order.
    """
    method = "GET"
    url = ""
    headers: dict[str, str] = {}
    body: str | None = None
    forced_post = False

    index = 0
    while index < len(tokens):
        clean = _strip_quotes(tokens[index])
        has_value = index + 1 < len(tokens)

        if clean in _METHOD_FLAGS:
            if has_value:
                index += 1
                method = _strip_quotes(tokens[index]).upper()
        elif clean in _HEADER_FLAGS:
            if has_value:
                index += 1
                header = _strip_quotes(tokens[index]).replace('\\"', '"')
                key, sep, value = header.partition(":")
                if sep:
                    headers[key.strip()] = value.strip()
                else:
                    logger.debug("skipping header without colon: %r", header)
        elif clean in _DATA_FLAGS:
            if has_value:
                index += 1
                body = (
                    _strip_body_quotes(tokens[index])
                    .replace(_POSIX_QUOTE_ESCAPE, "'")
                    .replace('\\"', '"')
                    .replace("\\\\", "\\")
                )
                forced_post = True
        elif not url and clean.startswith(("http", "localhost")):
            url = clean
        index += 1

    if not url:
        url = _fallback_url(tokens)

    return RequestFragment(
        method="POST" if forced_post else method,
        url=url,
        headers=headers,
        body=body,
        dialect=dialect,
    )


def _fallback_url(tokens: list[str]) -> str:
    """First token after the command name that is neither a flag nor a flag value."""
    for index in range(1, len(tokens)):
        candidate = _strip_quotes(tokens[index])
        if (
            candidate
            and not candidate.startswith("-")
            and not tokens[index - 1].startswith("-")
            and candidate != "curl"
        ):
            return candidate
    return ""


def _unescape_powershell(text: str) -> str:
    return text.replace('`"', '"').replace("`n", "\n").replace("`r", "\r")


def _parse_powershell(command: str) -> RequestFragment:
    """Extract request parts from an ``Invoke-WebRequest`` / ``iwr`` call."""
    start = max(command.find("Invoke-WebRequest"), command.find("iwr "), 0)
    invocation = command[start:]

    fragment = RequestFragment(dialect=Dialect.POWERSHELL)

    uri = _PS_URI.search(invocation)
    if uri:
        fragment.url = uri.group(1)

    method = _PS_METHOD.search(invocation)
    if method:
        fragment.method = method.group(1).upper()

    block = _PS_HEADERS.search(invocation)
    if block:
        for pair in _PS_HEADER_PAIR.finditer(block.group(1)):
            fragment.headers[pair.group(1).strip()] = _unescape_powershell(
                pair.group(2).strip()
            )

    body = _PS_BODY.search(invocation)
    if body:
        fragment.body = _unescape_powershell(body.group(1))

    return fragment
