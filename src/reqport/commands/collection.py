"""Collection commands -- import and export collection documents.

``collection import`` flattens a collection (folders are discarded) into a
JSON list of titled requests. ``collection export`` gathers requests from
request, collection, or API description files and writes one collection
document. Export is lossy: disabled rows and non-JSON bodies are dropped.
"""

from __future__ import annotations

from typing import Optional

import typer

from reqport.commands import dump_imported, handle_errors
from reqport.output import format_response, info, warning


collection_app = typer.Typer(no_args_is_help=True)


@collection_app.command("import")
@handle_errors
def collection_import(
    source: str = typer.Argument(help="Collection file or URL ('-' for stdin)."),
) -> None:
    """Import a collection document as a list of requests.

    Example::

        reqport collection import team.postman_collection.json
    """
    from reqport.collection import import_collection
    from reqport.parser import load_document

    requests = import_collection(load_document(source))
    info(f"Imported {len(requests)} request(s).")
    format_response(dump_imported(requests))


@collection_app.command("export")
@handle_errors
def collection_export(
    sources: list[str] = typer.Argument(
        help="Request, collection, or API description files."
    ),
    select: Optional[list[str]] = typer.Option(
        None, "--select", "-s", help="Export only requests with this title (repeatable)."
    ),
    name: Optional[str] = typer.Option(
        None, "--name", help="Collection name written to info.name."
    ),
) -> None:
    """Export requests as a collection document.

    Example::

        reqport collection export create-user.json list-users.json --name Users
        reqport collection export api.yaml --select "List users"
    """
    from reqport.collection import DEFAULT_COLLECTION_NAME, export_collection
    from reqport.parser import load_requests

    requests = [item for source in sources for item in load_requests(source)]
    document = export_collection(
        requests, selection=select or None, name=name or DEFAULT_COLLECTION_NAME
    )

    exported = len(document["item"])
    if select and not exported:
        warning("No request matched the selection.")
    info(f"Exported {exported} of {len(requests)} request(s).")
    format_response(document)
