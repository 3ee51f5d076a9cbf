"""Canonical Pydantic models shared across all specedit modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`HistoryConfig`, :class:`SelectionConfig`, :class:`HostConfig`,
    :class:`OutputConfig` and :class:`GlobalConfig`.

**Document models** -- describe a parsed specification document:
    :class:`DocumentFormat`, :class:`Dialect`, :class:`ParseResult`,
    :class:`SerializeResult` and :class:`ValidationResult`.

**Editor view models** -- derived, disposable views over the live document:
    :class:`NodeType`, :class:`TreeNode`, :class:`SelectionType`,
    :class:`Selection`, :class:`Severity`, :class:`ValidationProblem` and
    :class:`EnvironmentMessage`.

The live document itself is a plain ``dict`` tree. Models that carry it
declare the field as ``Any`` so that Pydantic passes the object through
untouched instead of copying it; the tree is shared by reference between
the state container, commands and readers.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# --- Configuration ---


class HistoryConfig(BaseModel):
    """Undo/redo history settings."""

    max_size: int = Field(
        default=100, ge=1, description="Maximum number of undoable commands kept"
    )


class SelectionConfig(BaseModel):
    """Selection back/forward navigation settings."""

    max_history: int = Field(
        default=50, ge=1, description="Maximum number of remembered selections"
    )


class HostConfig(BaseModel):
    """Settings for the host collaborator that reads and writes documents."""

    read_timeout: float = Field(
        default=10.0, gt=0, description="Seconds to wait for the initial document read"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specedit/config.json``.

    Loaded and saved by :func:`~specedit.config.load_global_config` and
    :func:`~specedit.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specedit.config.resolve_config`
    for the full precedence chain.
    """

    history: HistoryConfig = Field(default_factory=HistoryConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Documents ---


class DocumentFormat(str, enum.Enum):
    """Surface syntax of a specification document."""

    JSON = "json"
    YAML = "yaml"


class Dialect(str, enum.Enum):
    """Schema family and version of a specification document.

    Derived once from the discriminator fields (``swagger``, ``openapi``,
    ``asyncapi``) by :func:`~specedit.document.dialect.detect_dialect` and
    matched exhaustively by every consumer afterwards.
    """

    OPENAPI_2 = "openapi-2.0"
    OPENAPI_3_0 = "openapi-3.0"
    OPENAPI_3_1 = "openapi-3.1"
    ASYNCAPI_2 = "asyncapi-2"

    @property
    def is_openapi(self) -> bool:
        return self is not Dialect.ASYNCAPI_2

    @property
    def is_asyncapi(self) -> bool:
        return self is Dialect.ASYNCAPI_2


class ParseResult(BaseModel):
    """Outcome of :meth:`~specedit.document.service.DocumentService.parse`.

    On success ``document``, ``format`` and ``dialect`` are populated; on
    failure only ``error`` is.
    """

    success: bool
    document: Any = None
    format: Optional[DocumentFormat] = None
    dialect: Optional[Dialect] = None
    error: Optional[str] = None


class SerializeResult(BaseModel):
    """Outcome of :meth:`~specedit.document.service.DocumentService.serialize`."""

    success: bool
    content: Optional[str] = None
    error: Optional[str] = None


class ValidationResult(BaseModel):
    """Minimal structural validation outcome. Never blocks editing."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


# --- Navigation ---


class NodeType(str, enum.Enum):
    """Kinds of nodes emitted by the navigation tree builder."""

    ROOT = "root"
    INFO = "info"
    SERVERS = "servers"
    SERVER = "server"
    PATHS = "paths"
    PATH = "path"
    OPERATION = "operation"
    COMPONENTS = "components"
    SCHEMAS = "schemas"
    SCHEMA = "schema"
    SECURITY = "security"
    SECURITY_SCHEME = "securityScheme"
    TAGS = "tags"
    TAG = "tag"
    CHANNELS = "channels"
    CHANNEL = "channel"
    MESSAGES = "messages"
    MESSAGE = "message"


class TreeNode(BaseModel):
    """One node of the navigation outline.

    ``id`` is deterministic and unique within one generation of the tree;
    selections and problem paths address nodes by ``id``/``path`` strings,
    never by object identity.
    """

    id: str
    label: str
    type: NodeType
    path: Optional[str] = None
    children: Optional[list[TreeNode]] = None
    expanded: bool = False
    context: Optional[dict[str, Any]] = None


# --- Selection ---


class SelectionType(str, enum.Enum):
    """What kind of document element is focused in the editor."""

    NONE = "none"
    INFO = "info"
    SERVERS = "servers"
    SERVER = "server"
    PATHS = "paths"
    PATH = "path"
    OPERATION = "operation"
    PARAMETER = "parameter"
    REQUEST_BODY = "requestBody"
    RESPONSE = "response"
    COMPONENTS = "components"
    COMPONENT = "component"
    SCHEMAS = "schemas"
    SCHEMA = "schema"
    SECURITY = "security"
    SECURITY_SCHEME = "securityScheme"
    TAGS = "tags"
    TAG = "tag"
    CHANNELS = "channels"
    CHANNEL = "channel"
    MESSAGES = "messages"
    MESSAGE = "message"
    ROOT = "root"


class Selection(BaseModel):
    """The currently focused logical location in a document.

    Two selections are considered the same location when ``type`` and
    ``path`` match; ``context`` is extra detail (HTTP method, schema name,
    the raw problem path, ...).
    """

    type: SelectionType = SelectionType.NONE
    path: Optional[str] = None
    context: Optional[dict[str, Any]] = None

    def same_location(self, other: Selection) -> bool:
        return self.type == other.type and self.path == other.path


# --- Validation ---


class Severity(str, enum.Enum):
    """Validation problem severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationProblem(BaseModel):
    """A structured complaint about document content.

    ``path`` uses the dotted structure understood by
    :func:`~specedit.selection.problem_path.parse_problem_path`, e.g.
    ``paths./users.get.responses.200``.
    """

    id: str
    severity: Severity
    message: str
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    suggestion: Optional[str] = None


# --- Host messaging ---


class MessageType(str, enum.Enum):
    """Messages a host environment can send to the editor."""

    INIT = "init"
    SAVE = "save"
    UNDO = "undo"
    REDO = "redo"
    RELOAD = "reload"


class EnvironmentMessage(BaseModel):
    """A message delivered by the host to handlers registered via ``on_message``."""

    type: MessageType
    payload: Optional[dict[str, Any]] = None
