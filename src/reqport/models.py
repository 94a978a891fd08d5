"""Canonical Pydantic models shared across all reqport modules.

This is the single source of truth for data shapes in the project. Every
converter reads or writes :class:`RequestDescriptor`; no converter talks to
another except through it. The models fall into four groups:

**Canonical request model** -- the shape all converters agree on:
    :class:`HTTPMethod`, :class:`BodyType`, :class:`ValueType`,
    :class:`KeyValueRow`, :class:`RequestDescriptor`, :class:`ImportedRequest`,
    and the shell parser's :class:`RequestFragment` / :class:`Dialect`.

**Environments** -- variable bindings supplied by the caller:
    :class:`Binding`, :class:`AuthProfile`, :class:`Environment`.

**Decode-boundary documents** -- loosely-typed JSON validated exactly once
on import, so the codecs never probe raw dicts ad hoc:
    collection documents (:class:`CollectionDocument` and friends) and
    API description documents (:class:`SpecDocument` and friends).

**Configuration** -- persisted by :mod:`reqport.config`:
    :class:`OutputConfig`, :class:`GenerateConfig`, :class:`GlobalConfig`.

Request models are frozen: engine operations always return new values.
Wire names (``queryParams``, ``bodyType``, ``bodyContent``, ...) are accepted
on input alongside the Python field names and used by
``model_dump(by_alias=True)``.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# --- Canonical request model ---


class HTTPMethod(str, enum.Enum):
    """HTTP verbs a :class:`RequestDescriptor` may carry."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class BodyType(str, enum.Enum):
    """How :attr:`RequestDescriptor.body_content` should be interpreted."""

    NONE = "none"
    JSON = "json"
    FORM_DATA = "form-data"
    URLENCODED = "urlencoded"


class ValueType(str, enum.Enum):
    """Informational value type of a :class:`KeyValueRow` (never enforced)."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


class KeyValueRow(BaseModel):
    """One editable header or query-parameter entry.

    ``id`` is only unique within the owning sequence; rows without an id get
    their position assigned by :class:`RequestDescriptor`. A disabled row, or
    a row whose key is blank, is never emitted by a generator or exporter.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    key: str = ""
    value: str = ""
    type: ValueType = ValueType.STRING
    description: str = ""
    enabled: bool = True

    @field_validator("id", "key", "value", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        # Documents in the wild carry numeric ids and values.
        if value is None:
            return ""
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        try:
            return ValueType(value)
        except ValueError:
            return ValueType.STRING

    @property
    def is_emittable(self) -> bool:
        """Whether generators and exporters may emit this row."""
        return self.enabled and bool(self.key.strip())


class RequestDescriptor(BaseModel):
    """Canonical in-memory representation of one HTTP request template.

    The URL and every key/value may contain ``{{variable}}`` tokens; nothing
    here normalises or validates them. Row order in :attr:`query_params` and
    :attr:`headers` is significant and preserved by every converter.

    Example::

        req = RequestDescriptor(
            method="POST",
            url="{{host}}/users",
            headers=[KeyValueRow(key="Authorization", value="{{token}}")],
            body_type=BodyType.JSON,
            body_content='{"name": "ada"}',
        )
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    method: HTTPMethod = HTTPMethod.GET
    url: str = ""
    query_params: tuple[KeyValueRow, ...] = ()
    headers: tuple[KeyValueRow, ...] = ()
    body_type: BodyType = BodyType.NONE
    body_content: str = ""
    tags: frozenset[str] = frozenset()
    title: str = ""

    @field_validator("method", mode="before")
    @classmethod
    def _normalise_method(cls, value: Any) -> Any:
        if value is None or value == "":
            return HTTPMethod.GET
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("url", "body_content", "title", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("body_type", mode="before")
    @classmethod
    def _default_body_type(cls, value: Any) -> Any:
        return BodyType.NONE if value is None or value == "" else value

    @field_validator("query_params", "headers", mode="before")
    @classmethod
    def _none_to_rows(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("query_params", "headers")
    @classmethod
    def _assign_row_ids(
        cls, rows: tuple[KeyValueRow, ...]
    ) -> tuple[KeyValueRow, ...]:
        # First occurrence of an explicit id keeps it; every other row gets
        # its position, or the lowest free index when that is taken.
        keeps: list[bool] = []
        taken: set[str] = set()
        for row in rows:
            keeps.append(bool(row.id) and row.id not in taken)
            if row.id:
                taken.add(row.id)

        result: list[KeyValueRow] = []
        free = 0
        for index, (row, keep) in enumerate(zip(rows, keeps)):
            if not keep:
                new_id = str(index)
                if new_id in taken:
                    while str(free) in taken:
                        free += 1
                    new_id = str(free)
                taken.add(new_id)
                row = row.model_copy(update={"id": new_id})
            result.append(row)
        return tuple(result)

    @field_serializer("tags")
    def _serialize_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    def enabled_headers(self) -> list[KeyValueRow]:
        """Headers that are enabled and have a non-blank key, in order."""
        return [row for row in self.headers if row.is_emittable]

    def enabled_query_params(self) -> list[KeyValueRow]:
        """Query parameters that are enabled and have a non-blank key, in order."""
        return [row for row in self.query_params if row.is_emittable]

    def header_map(self) -> dict[str, str]:
        """Ordered key to value mapping of :meth:`enabled_headers`.

        A later row with the same key overwrites the value of an earlier one
        but keeps the earlier position.
        """
        return {row.key: row.value for row in self.enabled_headers()}

    def has_json_body(self) -> bool:
        """Whether a JSON body should be emitted."""
        return self.body_type == BodyType.JSON and self.body_content != ""


class ImportedRequest(BaseModel):
    """A titled request produced by an importer.

    ``id`` is the identifier matched by export selections; it defaults to the
    title.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    request: RequestDescriptor
    id: str = ""

    @model_validator(mode="before")
    @classmethod
    def _default_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("id"):
            data = {**data, "id": data.get("title", "")}
        return data


class Dialect(str, enum.Enum):
    """Shell command-line syntaxes understood by the shell parser."""

    POSIX = "posix"
    WINDOWS = "windows"
    POWERSHELL = "powershell"


class RequestFragment(BaseModel):
    """Partial request extracted from a pasted shell command.

    ``url`` may be empty; callers must validate it before use. ``method`` is
    kept as the raw upper-cased string so unusual verbs survive parsing;
    :meth:`to_request` rejects verbs outside :class:`HTTPMethod`.
    """

    method: str = "GET"
    url: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    dialect: Dialect = Dialect.POSIX

    def to_request(self, title: str = "") -> RequestDescriptor:
        """Build a :class:`RequestDescriptor` from this fragment.

        Headers become enabled rows in parse order; a non-empty body becomes
        a JSON body.

        Raises:
            DecodeError: If the method is not a supported HTTP verb.
        """
        from reqport.exceptions import DecodeError

        try:
            method = HTTPMethod(self.method.upper())
        except ValueError as exc:
            raise DecodeError(f"Unsupported HTTP method: {self.method}") from exc

        return RequestDescriptor(
            method=method,
            url=self.url,
            headers=tuple(
                KeyValueRow(key=key, value=value)
                for key, value in self.headers.items()
            ),
            body_type=BodyType.JSON if self.body else BodyType.NONE,
            body_content=self.body or "",
            title=title,
        )


# --- Environments ---


class Binding(BaseModel):
    """A single variable name to value pair."""

    key: str
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> str:
        return "" if value is None else str(value)


class AuthProfile(BaseModel):
    """OAuth2 client-credentials settings referenced by ``{{name}}`` tokens."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token_url: str
    client_id: str
    client_secret: str
    scope: Optional[str] = None
    grant_type: str = "client_credentials"


class Environment(BaseModel):
    """Named set of variable bindings plus optional auth profiles.

    Environments are read-only inputs: the engine never loads, saves, or
    selects one on its own. See :func:`reqport.config.load_environment` for
    reading one from disk.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    variables: list[Binding] = Field(default_factory=list)
    auth_profiles: dict[str, AuthProfile] = Field(
        default_factory=dict, alias="authConfigs"
    )

    @field_validator("variables")
    @classmethod
    def _unique_keys(cls, variables: list[Binding]) -> list[Binding]:
        keys = [binding.key for binding in variables]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ValueError(f"duplicate variable keys: {', '.join(duplicates)}")
        return variables

    def bindings(self) -> dict[str, str]:
        """Ordered ``{key: value}`` view of :attr:`variables`."""
        return {binding.key: binding.value for binding in self.variables}


# --- Collection documents (decode boundary) ---


def _text(value: Any) -> str:
    """Coerce a loosely-typed document scalar to text."""
    if value is None:
        return ""
    if isinstance(value, dict):
        # Description objects: {"content": ..., "type": "text/plain"}
        return str(value.get("content", ""))
    return str(value)


class BodyMode(str, enum.Enum):
    """Body modes of a collection request; unknown modes decode as ``OTHER``."""

    RAW = "raw"
    FORMDATA = "formdata"
    URLENCODED = "urlencoded"
    FILE = "file"
    GRAPHQL = "graphql"
    OTHER = "other"


class CollectionKeyValue(BaseModel):
    """A header or query entry of a collection request."""

    key: str = ""
    value: str = ""
    description: str = ""
    disabled: bool = False

    @field_validator("key", "value", "description", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> str:
        return _text(value)


class CollectionUrl(BaseModel):
    """Structured collection URL; ``host`` and ``path`` are stored as parts."""

    raw: str = ""
    protocol: str = ""
    host: list[str] = Field(default_factory=list)
    port: str = ""
    path: list[str] = Field(default_factory=list)
    query: list[CollectionKeyValue] = Field(default_factory=list)

    @field_validator("raw", "protocol", "port", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> str:
        return _text(value)

    @field_validator("host", "path", mode="before")
    @classmethod
    def _as_parts(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [
                _text(part.get("value")) if isinstance(part, dict) else _text(part)
                for part in value
            ]
        return value

    @field_validator("query", mode="before")
    @classmethod
    def _none_query(cls, value: Any) -> Any:
        return [] if value is None else value


class CollectionBody(BaseModel):
    """Request body of a collection request."""

    mode: BodyMode = BodyMode.OTHER
    raw: str = ""
    formdata: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> BodyMode:
        try:
            return BodyMode(value)
        except ValueError:
            return BodyMode.OTHER

    @field_validator("raw", mode="before")
    @classmethod
    def _coerce_raw(cls, value: Any) -> str:
        return _text(value)

    @field_validator("formdata", mode="before")
    @classmethod
    def _none_formdata(cls, value: Any) -> Any:
        return [] if value is None else value


class CollectionRequest(BaseModel):
    """The ``request`` object of a collection leaf.

    A bare string request is shorthand for ``{"url": <string>, "method":
    "GET"}``.
    """

    method: HTTPMethod = HTTPMethod.GET
    url: Union[str, CollectionUrl, None] = None
    header: list[CollectionKeyValue] = Field(default_factory=list)
    body: Optional[CollectionBody] = None

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"url": value, "method": "GET"}
        return value

    @field_validator("method", mode="before")
    @classmethod
    def _normalise_method(cls, value: Any) -> Any:
        if value is None or value == "":
            return HTTPMethod.GET
        return value.upper() if isinstance(value, str) else value

    @field_validator("header", mode="before")
    @classmethod
    def _none_header(cls, value: Any) -> Any:
        return [] if value is None else value


class CollectionRequestItem(BaseModel):
    """A collection node that carries a request (a leaf)."""

    name: str = ""
    request: CollectionRequest


class CollectionFolder(BaseModel):
    """A collection node without a request; its children are visited."""

    name: str = ""
    item: list[CollectionNode] = Field(default_factory=list)

    @field_validator("item", mode="before")
    @classmethod
    def _none_items(cls, value: Any) -> Any:
        return [] if value is None else value


def _node_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "request" if value.get("request") is not None else "folder"
    return "request" if getattr(value, "request", None) is not None else "folder"


CollectionNode = Annotated[
    Union[
        Annotated[CollectionRequestItem, Tag("request")],
        Annotated[CollectionFolder, Tag("folder")],
    ],
    Discriminator(_node_kind),
]

CollectionFolder.model_rebuild()


class CollectionInfo(BaseModel):
    """The ``info`` block of a collection document."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    schema_: str = Field(default="", alias="schema")


class CollectionDocument(BaseModel):
    """A complete collection document: ``info`` plus a tree of nodes."""

    info: CollectionInfo = Field(default_factory=CollectionInfo)
    item: list[CollectionNode] = Field(default_factory=list)

    @field_validator("item", mode="before")
    @classmethod
    def _none_items(cls, value: Any) -> Any:
        return [] if value is None else value


# --- API description documents (decode boundary) ---


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per the ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class SpecParameter(BaseModel):
    """A parameter object; an unrecognised ``in`` decodes as ``None``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    location: Optional[ParameterLocation] = Field(default=None, alias="in")
    description: str = ""

    @field_validator("name", "description", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> str:
        return _text(value)

    @field_validator("location", mode="before")
    @classmethod
    def _coerce_location(cls, value: Any) -> Optional[ParameterLocation]:
        try:
            return ParameterLocation(value)
        except ValueError:
            return None


class SpecRequestBody(BaseModel):
    """The ``requestBody`` of an operation; only the media types matter."""

    content: dict[str, Any] = Field(default_factory=dict)


class SpecOperation(BaseModel):
    """One operation object under a path item."""

    model_config = ConfigDict(populate_by_name=True)

    summary: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    tags: list[str] = Field(default_factory=list)
    parameters: list[SpecParameter] = Field(default_factory=list)
    request_body: Optional[SpecRequestBody] = Field(default=None, alias="requestBody")

    @field_validator("parameters", "tags", mode="before")
    @classmethod
    def _none_list(cls, value: Any) -> Any:
        return [] if value is None else value


class SpecServer(BaseModel):
    """A ``servers`` entry; only the first server's url is used."""

    url: str = ""


class SpecDocument(BaseModel):
    """Top-level shape of an API description document.

    Path items are kept as raw mappings because their method keys are matched
    case-insensitively and may carry ``$ref`` pointers that need the whole
    document to resolve.
    """

    servers: list[SpecServer] = Field(default_factory=list)
    paths: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @field_validator("servers", mode="before")
    @classmethod
    def _none_servers(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("paths", mode="before")
    @classmethod
    def _none_paths(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def base_url(self) -> str:
        """The first server's url, or an empty string."""
        return self.servers[0].url if self.servers else ""


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GenerateConfig(BaseModel):
    """Code-generation defaults stored in :class:`GlobalConfig`."""

    default_target: str = Field(
        default="curl", description="Snippet target used when --target is omitted"
    )
    curl_line_continuation: bool = Field(
        default=True, description="Put each curl argument on its own line"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/reqport/config.json``.

    Loaded and saved by :func:`~reqport.config.load_global_config` and
    :func:`~reqport.config.save_global_config`. Fields here have the lowest
    precedence and can be overridden by environment variables or CLI flags.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    generate: GenerateConfig = Field(default_factory=GenerateConfig)
