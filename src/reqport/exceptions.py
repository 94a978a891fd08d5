"""Exception hierarchy for reqport.

All exceptions inherit from :class:`ReqportError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`reqport.exit_codes`.
The top-level error handler in :func:`reqport.app.main` catches
``ReqportError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The conversion engine itself raises only :class:`DecodeError` (malformed
collection or spec documents) and :class:`InvalidUsageError` (unknown
snippet target). Lenient parse situations such as an unterminated quote,
a missing URL, or an unrecognised body mode are not errors.

Subclass hierarchy::

    ReqportError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- DecodeError            (exit 7)
    +-- MissingVariablesError  (exit 8)
    +-- ConfigError            (exit 1)
"""

from __future__ import annotations

from collections.abc import Iterable

from reqport.exit_codes import (
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MISSING_VARIABLES,
)


class ReqportError(Exception):
    """Base exception for all reqport errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ReqportError):
    """Raised for invalid CLI arguments or an unknown code-generation target."""

    exit_code = EXIT_INVALID_USAGE


class DecodeError(ReqportError):
    """Raised when a collection, spec, or request document has the wrong shape.

    Imports are atomic: when this is raised no partial result exists.
    """

    exit_code = EXIT_DECODE_ERROR


class MissingVariablesError(ReqportError):
    """Raised by the CLI when requests depend on variables an environment lacks.

    The engine only *returns* missing names (see
    :func:`reqport.variables.find_missing_variables`); turning a non-empty
    result into a failure is the caller's decision.

    Args:
        missing: The unresolved variable names.
        environment: Name of the environment that was checked.
    """

    exit_code = EXIT_MISSING_VARIABLES

    def __init__(self, missing: Iterable[str], environment: str = ""):
        self.missing = sorted(missing)
        self.environment = environment
        target = f" '{environment}'" if environment else ""
        super().__init__(
            f"Environment{target} is missing variables: {', '.join(self.missing)}"
        )


class ConfigError(ReqportError):
    """Raised for configuration problems (invalid config or environment files)."""

    exit_code = EXIT_GENERIC_FAILURE
