"""Spec command -- import requests from an API description document."""

from __future__ import annotations

import typer

from reqport.commands import dump_imported, handle_errors
from reqport.output import format_response, info


spec_app = typer.Typer(no_args_is_help=True)


@spec_app.command("import")
@handle_errors
def spec_import(
    source: str = typer.Argument(
        help="OpenAPI document (JSON or YAML): a file path, URL, or '-'."
    ),
) -> None:
    """Create one request per operation of an API description.

    Example::

        reqport spec import openapi.yaml
        reqport spec import https://api.example.com/openapi.json --json
    """
    from reqport.parser import import_spec, load_document

    requests = import_spec(load_document(source))
    info(f"Imported {len(requests)} operation(s).")
    format_response(dump_imported(requests))
