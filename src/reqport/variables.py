"""Template-variable interpolation over :class:`~reqport.models.RequestDescriptor`.

A template token is ``{{`` followed by the shortest run of characters up to
the next ``}}``. The run is the identifier, trimmed of surrounding whitespace
before lookup; it is not restricted to identifier-safe characters, so
``{{ base url }}`` names the variable ``base url``.

Substitution is non-strict: a token whose identifier has no binding is left
exactly as written, braces included, so a partially configured request stays
well-formed. Bindings are always passed in explicitly; there is no ambient
"selected environment".

Public functions:

* :func:`extract_variables` / :func:`substitute` -- single strings.
* :func:`extract_required_variables` -- every identifier a request references.
* :func:`find_missing_variables` / :func:`check_environment` -- the dependency
  check run before copying requests into another environment.
* :func:`resolve_request` / :func:`build_url` -- a fully substituted request.
* :func:`substitute_auth_tokens` -- replace auth-profile references with bearer
  tokens obtained from a caller-supplied provider.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping

from reqport.models import AuthProfile, Environment, KeyValueRow, RequestDescriptor

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\{\{(.+?)\}\}")
"""Matches one ``{{identifier}}`` token; group 1 is the untrimmed identifier."""

TokenProvider = Callable[[str, AuthProfile], str]


def extract_variables(text: str | None) -> list[str]:
    """Return the trimmed identifiers referenced in *text*, first-seen order."""
    if not text:
        return []
    found: dict[str, None] = {}
    for match in TOKEN_PATTERN.finditer(text):
        found.setdefault(match.group(1).strip(), None)
    return list(found)


def substitute(text: str, bindings: Mapping[str, str]) -> str:
    """Replace every bound ``{{identifier}}`` token in *text*.

    Args:
        text: Template text.
        bindings: Variable name to value mapping.

    Returns:
        The substituted text. Unbound tokens are kept verbatim.

    Example::

        >>> substitute("{{host}}/{{ path }}/{{missing}}", {"host": "h", "path": "p"})
        'h/p/{{missing}}'
    """
    if not text:
        return text

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if name in bindings:
            return bindings[name]
        return match.group(0)

    return TOKEN_PATTERN.sub(_replace, text)


def extract_required_variables(request: RequestDescriptor) -> set[str]:
    """Collect every identifier *request* depends on.

    Scans the URL, each header key and value, each query-parameter key and
    value, and the body content only when the body type is JSON. Disabled
    rows are scanned too: they may be re-enabled after a copy.
    """
    required: set[str] = set(extract_variables(request.url))
    for row in (*request.headers, *request.query_params):
        required.update(extract_variables(row.key))
        required.update(extract_variables(row.value))
    if request.has_json_body():
        required.update(extract_variables(request.body_content))
    return required


def find_missing_variables(
    requests: Iterable[RequestDescriptor], available_keys: Iterable[str]
) -> set[str]:
    """Return the identifiers *requests* need that *available_keys* lack.

    An empty result means every dependency is bound. A non-empty result is a
    precondition failure for copying the requests; what to do about it
    (clone an environment, copy anyway, abort) is up to the caller.
    """
    required: set[str] = set()
    count = 0
    for request in requests:
        required |= extract_required_variables(request)
        count += 1
    missing = required - set(available_keys)
    logger.debug(
        "dependency check: %d requests, %d required, %d missing",
        count,
        len(required),
        len(missing),
    )
    return missing


def check_environment(
    requests: Iterable[RequestDescriptor], environment: Environment
) -> set[str]:
    """Run :func:`find_missing_variables` against *environment*'s binding keys."""
    return find_missing_variables(requests, environment.bindings().keys())


def _substitute_rows(
    rows: Iterable[KeyValueRow], bindings: Mapping[str, str]
) -> tuple[KeyValueRow, ...]:
    return tuple(
        row.model_copy(
            update={
                "key": substitute(row.key, bindings),
                "value": substitute(row.value, bindings),
            }
        )
        for row in rows
    )


def resolve_request(
    request: RequestDescriptor, bindings: Mapping[str, str]
) -> RequestDescriptor:
    """Return a copy of *request* with *bindings* substituted everywhere.

    The URL, header and query-parameter keys and values are substituted; the
    body only when it is JSON. Row order, ids, and enabled flags are kept.
    """
    update: dict[str, object] = {
        "url": substitute(request.url, bindings),
        "headers": _substitute_rows(request.headers, bindings),
        "query_params": _substitute_rows(request.query_params, bindings),
    }
    if request.has_json_body():
        update["body_content"] = substitute(request.body_content, bindings)
    return request.model_copy(update=update)


def build_url(request: RequestDescriptor, bindings: Mapping[str, str]) -> str:
    """Return the final URL: substituted, with enabled query params appended.

    Parameters are appended as ``key=value`` pairs without percent-encoding,
    joined with ``&`` onto a URL that already contains ``?``.
    """
    url = substitute(request.url, bindings)
    params = request.enabled_query_params()
    if not params:
        return url
    query = "&".join(
        f"{row.key}={substitute(row.value, bindings)}" for row in params
    )
    return url + ("&" if "?" in url else "?") + query


def substitute_auth_tokens(
    text: str,
    auth_profiles: Mapping[str, AuthProfile],
    token_provider: TokenProvider,
) -> str:
    """Replace tokens that name an auth profile with ``Bearer <token>``.

    The engine never fetches tokens: *token_provider* is called with the
    profile name and :class:`~reqport.models.AuthProfile` and must return the
    access token. When the provider raises, the token is left as written and
    the failure is logged at debug level. Tokens that do not name a profile
    are left unchanged.
    """
    if not text:
        return text

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        profile = auth_profiles.get(name)
        if profile is None:
            return match.group(0)
        try:
            return f"Bearer {token_provider(name, profile)}"
        except Exception as exc:
            logger.debug("token provider failed for %s: %s", name, exc)
            return match.group(0)

    return TOKEN_PATTERN.sub(_replace, text)
