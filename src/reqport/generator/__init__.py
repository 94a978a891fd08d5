"""Code generation -- turn a request into text another tool can run.

The single dispatcher :func:`generate` renders a
:class:`~reqport.models.RequestDescriptor` for one :class:`SnippetTarget`.
Generators are pure functions: nothing is executed, validated, or fetched.

Typical usage::

    from reqport.generator import SnippetTarget, generate

    print(generate(request, SnippetTarget.PYTHON))

Sub-modules:

* :mod:`~reqport.generator.shell` -- POSIX curl command lines.
* :mod:`~reqport.generator.snippets` -- JavaScript, Python, and Java
  client snippets.
"""

from __future__ import annotations

import enum
from collections.abc import Callable

from reqport.exceptions import InvalidUsageError
from reqport.generator.shell import generate_curl
from reqport.generator.snippets import (
    generate_java,
    generate_javascript,
    generate_python,
)
from reqport.models import RequestDescriptor


class SnippetTarget(str, enum.Enum):
    """Output formats supported by :func:`generate`."""

    CURL = "curl"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"


_GENERATORS: dict[SnippetTarget, Callable[[RequestDescriptor], str]] = {
    SnippetTarget.CURL: generate_curl,
    SnippetTarget.JAVASCRIPT: generate_javascript,
    SnippetTarget.PYTHON: generate_python,
    SnippetTarget.JAVA: generate_java,
}

# Syntax names understood by rich.syntax.Syntax, used by the CLI.
SYNTAX_LEXERS: dict[SnippetTarget, str] = {
    SnippetTarget.CURL: "bash",
    SnippetTarget.JAVASCRIPT: "javascript",
    SnippetTarget.PYTHON: "python",
    SnippetTarget.JAVA: "java",
}


def available_targets() -> list[str]:
    """Names of every supported target, in declaration order."""
    return [target.value for target in SnippetTarget]


def resolve_target(target: str | SnippetTarget) -> SnippetTarget:
    """Convert *target* to a :class:`SnippetTarget` (case-insensitive).

    Raises:
        InvalidUsageError: If *target* is not a supported target.
    """
    if isinstance(target, SnippetTarget):
        return target
    try:
        return SnippetTarget(target.strip().lower())
    except ValueError:
        raise InvalidUsageError(
            f"Unknown target '{target}'. Choose from: {', '.join(available_targets())}"
        ) from None


def generate(request: RequestDescriptor, target: str | SnippetTarget) -> str:
    """Render *request* for *target*.

    Raises:
        InvalidUsageError: If *target* is not a supported target.
    """
    return _GENERATORS[resolve_target(target)](request)


__all__ = [
    "SnippetTarget",
    "available_targets",
    "generate",
    "generate_curl",
    "resolve_target",
]
