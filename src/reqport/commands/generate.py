"""Generate commands -- render a request as a curl command or client snippet."""

from __future__ import annotations

from typing import Optional

import typer

from reqport.commands import handle_errors
from reqport.output import debug, print_code, print_table, warning


_LANGUAGES = {
    "curl": "Shell (POSIX)",
    "javascript": "JavaScript (fetch)",
    "python": "Python (requests)",
    "java": "Java (OkHttp)",
}


@handle_errors
def generate_command(
    source: str = typer.Argument(help="Request, collection, or API description file."),
    target: Optional[str] = typer.Option(
        None,
        "--target",
        "-t",
        help="Snippet target (see 'reqport targets'). Default from config.",
    ),
    env: Optional[str] = typer.Option(
        None, "--env", "-e", help="Environment file used to fill in {{variables}}."
    ),
    select: Optional[str] = typer.Option(
        None, "--select", "-s", help="Title of the request to render."
    ),
    single_line: bool = typer.Option(
        False, "--single-line", help="Write curl commands on a single line."
    ),
) -> None:
    """Generate a snippet for a request.

    Resolution order for the target: ``--target``, then ``REQPORT_TARGET``,
    then ``generate.default_target`` in the global config.

    Example::

        reqport generate request.json
        reqport generate request.json --target python --env staging.json
    """
    from reqport.config import load_environment, load_global_config, resolve_target
    from reqport.exceptions import InvalidUsageError
    from reqport.generator import SYNTAX_LEXERS, SnippetTarget, generate
    from reqport.generator import resolve_target as to_snippet_target
    from reqport.generator.shell import generate_curl
    from reqport.parser import load_requests
    from reqport.variables import resolve_request

    config = load_global_config()
    snippet_target = to_snippet_target(resolve_target(target, config))
    debug(f"Target: {snippet_target.value}")

    requests = load_requests(source)
    if not requests:
        raise InvalidUsageError(f"No requests found in {source}")
    if select is not None:
        requests = [item for item in requests if select in (item.id, item.title)]
        if not requests:
            raise InvalidUsageError(f"No request titled '{select}' in {source}")
    elif len(requests) > 1:
        warning(f"{source} holds {len(requests)} requests; rendering the first.")
    request = requests[0].request

    if env:
        environment = load_environment(env)
        request = resolve_request(request, environment.bindings())

    if snippet_target == SnippetTarget.CURL:
        multiline = config.generate.curl_line_continuation and not single_line
        code = generate_curl(request, multiline=multiline)
    else:
        code = generate(request, snippet_target)
    print_code(code, SYNTAX_LEXERS[snippet_target])


def targets_command() -> None:
    """List the available snippet targets."""
    from reqport.generator import available_targets

    rows = [[name, _LANGUAGES.get(name, "")] for name in available_targets()]
    print_table(["target", "language"], rows, title="Snippet targets")
