"""Shared test fixtures for reqport.

Provides fixture documents, isolated config directories, output state
management, and a CLI runner. These fixtures are discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from reqport.models import BodyType, KeyValueRow, RequestDescriptor
from reqport.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. Once CliRunner restores the real streams those
    references are stale, so a fresh manager is created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fixture documents
# ---------------------------------------------------------------------------


@pytest.fixture
def collection_path() -> Path:
    return FIXTURES_DIR / "team_collection.json"


@pytest.fixture
def collection_raw(collection_path: Path) -> dict[str, Any]:
    """Nested collection with folders, disabled rows, and mixed body modes."""
    with open(collection_path) as f:
        return json.load(f)


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def petstore_raw(petstore_path: Path) -> dict[str, Any]:
    """OpenAPI 3.0 document with path-level parameters and $ref objects."""
    with open(petstore_path) as f:
        return yaml.safe_load(f)


@pytest.fixture
def staging_env_path() -> Path:
    return FIXTURES_DIR / "staging_environment.json"


@pytest.fixture
def exported_env_path() -> Path:
    """Environment whose variables and authConfigs are JSON-encoded strings."""
    return FIXTURES_DIR / "exported_environment.json"


# ---------------------------------------------------------------------------
# Request fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def create_user_request() -> RequestDescriptor:
    """POST with template variables, a disabled header, and a JSON body."""
    return RequestDescriptor(
        method="POST",
        url="{{baseUrl}}/users",
        headers=[
            KeyValueRow(key="Content-Type", value="application/json"),
            KeyValueRow(key="Authorization", value="Bearer {{token}}"),
            KeyValueRow(key="X-Trace", value="{{traceId}}", enabled=False),
        ],
        query_params=[KeyValueRow(key="notify", value="{{notify}}")],
        body_type=BodyType.JSON,
        body_content='{"name": "{{userName}}", "role": "admin"}',
        title="Create user",
    )


@pytest.fixture
def request_file(tmp_path: Path, create_user_request: RequestDescriptor) -> Path:
    """The create-user request written in its JSON wire form."""
    path = tmp_path / "create-user.json"
    path.write_text(
        json.dumps(create_user_request.model_dump(mode="json", by_alias=True)),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of tmp_path,
    forces the XDG layout, clears REQPORT_TARGET, and
    changes the working directory to tmp_path.
    """
    monkeypatch.setattr("reqport.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("REQPORT_TARGET", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
