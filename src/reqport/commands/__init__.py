"""Built-in CLI sub-commands for reqport.

* :mod:`~reqport.commands.shell` -- ``parse``: shell command to request.
* :mod:`~reqport.commands.generate` -- ``generate`` and ``targets``.
* :mod:`~reqport.commands.collection` -- collection import and export.
* :mod:`~reqport.commands.spec` -- API description import.
* :mod:`~reqport.commands.variables` -- ``vars`` extract, check, resolve.
* :mod:`~reqport.commands.config` -- view and modify global settings.

Single commands are plain callbacks registered on the root app; command
groups are :class:`typer.Typer` sub-applications.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import typer

from reqport.exceptions import ReqportError
from reqport.models import ImportedRequest
from reqport.output import error

F = TypeVar("F", bound=Callable[..., Any])


def handle_errors(func: F) -> F:
    """Report a :class:`~reqport.exceptions.ReqportError` and exit with its code."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ReqportError as exc:
            error(str(exc))
            raise typer.Exit(code=exc.exit_code) from None

    return wrapper  # type: ignore[return-value]


def dump_imported(requests: list[ImportedRequest]) -> list[dict[str, Any]]:
    """Wire form of imported requests, as printed by the import commands."""
    return [item.model_dump(mode="json", by_alias=True) for item in requests]
