"""Importers -- turn shell commands and API descriptions into requests.

Typical usage::

    from reqport.parser import load_document, import_spec, parse_command

    fragment = parse_command("curl -X POST https://api.example.com -d '{}'")
    requests = import_spec(load_document("openapi.yaml"))

Sub-modules:

* :mod:`~reqport.parser.shell` -- POSIX, Windows cmd, and PowerShell
  command parsing.
* :mod:`~reqport.parser.openapi` -- one request per operation of an API
  description document.
* :mod:`~reqport.parser.resolver` -- internal ``$ref`` dereferencing.
* :mod:`~reqport.parser.loader` -- file, URL, and stdin input with JSON/YAML
  detection.
"""

from reqport.parser.loader import load_document, load_requests, read_text
from reqport.parser.openapi import import_spec
from reqport.parser.shell import parse_command

__all__ = ["load_document", "load_requests", "read_text", "import_spec", "parse_command"]
