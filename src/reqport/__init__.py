"""reqport -- convert HTTP request descriptions between formats.

This package moves a single canonical request model between the formats
developers paste, share, and run: curl and PowerShell command lines,
collection documents, API description documents, and client code snippets.
Requests may carry ``{{variable}}`` tokens that are resolved against an
environment on demand.

Typical workflow::

    reqport parse request.sh > request.json       # shell command -> request
    reqport generate request.json --target python # request -> snippet
    reqport collection export request.json > collection.json

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    variables: Template-variable extraction, substitution, and checks.
    collection: Collection document import and export.
    parser: Shell command parsing, API description import, document loading.
    generator: curl command and client code generation.
    config: XDG-aware configuration and environment loading.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
