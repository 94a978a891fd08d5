"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~reqport.exceptions.ReqportError` subclass, so shell
scripts can tell a malformed collection apart from a missing variable
without parsing stderr.

Example::

    $ reqport vars check --env staging.json --strict requests/*.json
    $ echo $?
    8   # EXIT_MISSING_VARIABLES -- the target environment lacks bindings
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments (e.g. an unknown snippet target)."""

EXIT_DECODE_ERROR = 7
"""A collection, spec, or request document could not be decoded."""

EXIT_MISSING_VARIABLES = 8
"""Requests reference template variables the target environment does not bind."""
