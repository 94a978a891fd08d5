"""Parse command -- turn a pasted curl or PowerShell command into a request."""

from __future__ import annotations

import typer

from reqport.commands import handle_errors
from reqport.output import debug, format_response, warning


@handle_errors
def parse_command(
    source: str = typer.Argument(
        "-", help="File holding the command, or '-' to read stdin."
    ),
    title: str = typer.Option("", "--title", "-t", help="Title for the request."),
) -> None:
    """Parse a curl or PowerShell command into request JSON.

    The dialect (POSIX shell, Windows cmd, PowerShell) is detected from the
    command text.

    Example::

        reqport parse request.sh
        pbpaste | reqport parse --title "Create user"
    """
    from reqport.parser import parse_command as parse, read_text

    fragment = parse(read_text(source))
    debug(f"Detected {fragment.dialect.value} command")
    if not fragment.url:
        warning("No URL found in the command.")

    request = fragment.to_request(title=title)
    format_response(request.model_dump(mode="json", by_alias=True))
