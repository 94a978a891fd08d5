"""Config commands -- view and modify global configuration.

Provides the ``reqport config`` sub-command group for reading, updating,
and resetting the global configuration file
(:class:`~reqport.models.GlobalConfig`): the default output format and the
code-generation defaults.
"""

from __future__ import annotations

from typing import Any

import typer

from reqport.commands import handle_errors
from reqport.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)

_OUTPUT_FORMATS = ("auto", "json", "plain", "rich")


@config_app.command("show")
@handle_errors
def config_show() -> None:
    """Show current configuration.

    Example::

        reqport config show
        reqport config show --json
    """
    from reqport.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
@handle_errors
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g. 'generate.default_target')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the existing field, and the updated
    config is validated before it is saved.

    Raises:
        typer.Exit: With code 2 if the key path is unknown or the value is
            rejected.

    Example::

        reqport config set output.format json
        reqport config set generate.default_target python
        reqport config set generate.curl_line_continuation false
    """
    from pydantic import ValidationError

    from reqport.config import load_global_config, save_global_config
    from reqport.exceptions import InvalidUsageError
    from reqport.generator import resolve_target
    from reqport.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    *parents, final_key = key.split(".")
    target = data
    for k in parents:
        if not isinstance(target.get(k), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced: Any = value
    if isinstance(target[final_key], bool):
        coerced = value.lower() in ("true", "1", "yes")
    if key == "output.format" and value not in _OUTPUT_FORMATS:
        raise InvalidUsageError(
            f"Unknown output format '{value}'. Choose from: {', '.join(_OUTPUT_FORMATS)}"
        )
    if key == "generate.default_target":
        coerced = resolve_target(value).value
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
@handle_errors
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation."),
) -> None:
    """Reset configuration to defaults.

    Example::

        reqport config reset --yes
    """
    from reqport.config import save_global_config
    from reqport.models import GlobalConfig

    if not yes and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
