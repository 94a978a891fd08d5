"""Variable commands -- inspect and resolve ``{{variable}}`` tokens.

* ``vars extract`` lists the variables each request depends on.
* ``vars check`` reports variables an environment does not bind; with
  ``--strict`` a non-empty result fails with exit code 8.
* ``vars resolve`` substitutes an environment into requests.
"""

from __future__ import annotations

import typer

from reqport.commands import handle_errors
from reqport.output import format_response, print_table, success, warning


vars_app = typer.Typer(no_args_is_help=True)


@vars_app.command("extract")
@handle_errors
def vars_extract(
    sources: list[str] = typer.Argument(
        help="Request, collection, or API description files."
    ),
) -> None:
    """List every variable the requests reference.

    Example::

        reqport vars extract team.postman_collection.json
    """
    from reqport.parser import load_requests
    from reqport.variables import extract_required_variables

    used_by: dict[str, list[str]] = {}
    for source in sources:
        for item in load_requests(source):
            for name in sorted(extract_required_variables(item.request)):
                used_by.setdefault(name, []).append(item.title)

    rows = [[name, ", ".join(used_by[name])] for name in sorted(used_by)]
    print_table(["variable", "used by"], rows, title="Variables")


@vars_app.command("check")
@handle_errors
def vars_check(
    sources: list[str] = typer.Argument(
        help="Request, collection, or API description files."
    ),
    env: str = typer.Option(..., "--env", "-e", help="Environment file to check."),
    strict: bool = typer.Option(
        False, "--strict", help="Fail with exit code 8 when variables are missing."
    ),
) -> None:
    """Check that an environment binds every variable the requests use.

    Example::

        reqport vars check --env staging.json collection.json --strict
    """
    from reqport.config import load_environment
    from reqport.exceptions import MissingVariablesError
    from reqport.parser import load_requests
    from reqport.variables import check_environment

    environment = load_environment(env)
    requests = [item.request for source in sources for item in load_requests(source)]
    missing = check_environment(requests, environment)

    if not missing:
        success(f"Environment '{environment.name}' binds every variable.")
        format_response({"environment": environment.name, "missing": []})
        return
    if strict:
        raise MissingVariablesError(missing, environment.name)

    warning(
        f"Environment '{environment.name}' is missing: {', '.join(sorted(missing))}"
    )
    format_response({"environment": environment.name, "missing": sorted(missing)})


@vars_app.command("resolve")
@handle_errors
def vars_resolve(
    source: str = typer.Argument(
        help="Request, collection, or API description file."
    ),
    env: str = typer.Option(..., "--env", "-e", help="Environment file to apply."),
) -> None:
    """Substitute an environment's variables into requests.

    Unbound ``{{tokens}}`` are left as written. Output is the resolved
    request, or a list when the file holds several.

    Example::

        reqport vars resolve --env staging.json request.json
    """
    from reqport.config import load_environment
    from reqport.parser import load_requests
    from reqport.variables import find_missing_variables, resolve_request

    environment = load_environment(env)
    bindings = environment.bindings()
    requests = load_requests(source)

    missing = find_missing_variables([item.request for item in requests], bindings)
    if missing:
        warning(f"Left unresolved: {', '.join(sorted(missing))}")

    resolved = [
        resolve_request(item.request, bindings).model_dump(mode="json", by_alias=True)
        for item in requests
    ]
    format_response(resolved[0] if len(resolved) == 1 else resolved)
