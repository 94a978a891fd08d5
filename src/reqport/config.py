"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent state of the reqport CLI. The conversion
engine never touches it; only :mod:`reqport.app` and the command modules do.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.reqport/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- a single :class:`~reqport.models.GlobalConfig` JSON
  file storing defaults (output format, default snippet target).
* **Precedence resolution** -- :func:`resolve_target` merges the CLI flag,
  the ``REQPORT_TARGET`` environment variable, and the global config.
* **Environments** -- :func:`load_environment` reads an environment file,
  accepting both the model shape and exports where ``variables`` and
  ``authConfigs`` are JSON-encoded strings.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from reqport.exceptions import ConfigError, DecodeError
from reqport.models import Environment, GlobalConfig

_APP_NAME = "reqport"
_CONFIG_FILENAME = "config.json"
_TARGET_ENV_VAR = "REQPORT_TARGET"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/reqport/`` (default ``~/.config/reqport/``).
    On macOS/Windows: ``~/.reqport/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/reqport/`` (default ``~/.local/share/reqport/``).
    On macOS/Windows: ``~/.reqport/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a sibling temp file and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as handle:
            tmp_path = handle.name
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The stored :class:`~reqport.models.GlobalConfig`, or defaults when
        the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist *config* atomically."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_target(
    cli_target: Optional[str] = None, config: Optional[GlobalConfig] = None
) -> str:
    """Pick the snippet target to generate.

    Precedence (high to low):
        1. ``cli_target`` (the ``--target`` flag)
        2. ``REQPORT_TARGET`` environment variable
        3. ``generate.default_target`` in the global config
        4. ``"curl"`` (the config default)
    """
    if cli_target:
        return cli_target
    env_target = os.environ.get(_TARGET_ENV_VAR)
    if env_target:
        return env_target
    if config is None:
        config = load_global_config()
    return config.generate.default_target


# --- Environments ---


def load_environment(source: str) -> Environment:
    """Read an environment file (JSON or YAML) into an :class:`Environment`.

    Raises:
        ConfigError: If the file cannot be read or does not describe a valid
            environment (for example duplicate variable keys).
    """
    from reqport.parser.loader import load_document

    try:
        raw = load_document(source)
    except DecodeError as exc:
        raise ConfigError(f"Cannot load environment {source}: {exc}") from exc
    return parse_environment(raw, default_name=Path(source).stem)


def parse_environment(raw: dict[str, Any], default_name: str = "") -> Environment:
    """Validate an environment mapping, decoding JSON-encoded string fields.

    Raises:
        ConfigError: If the mapping is not a valid environment.
    """
    data = dict(raw)
    data.setdefault("name", default_name)
    for field in ("variables", "authConfigs", "auth_profiles"):
        if isinstance(data.get(field), str):
            try:
                data[field] = json.loads(data[field] or "null")
            except json.JSONDecodeError as exc:
                raise ConfigError(f"Environment field '{field}' is not JSON: {exc}") from exc
        if data.get(field) is None:
            data.pop(field, None)
    try:
        return Environment.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid environment '{data['name']}': {exc}") from exc
