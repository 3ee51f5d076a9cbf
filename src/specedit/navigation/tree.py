"""Project a specification document onto a uniform navigation outline.

:func:`build_navigation_tree` is a pure function of the document: it never
mutates the tree it reads and caches nothing, so callers rebuild it after
every change. Section nodes (``servers``, ``paths``, ``components`` ...)
are emitted only when they have at least one child. Item nodes (a path, a
channel) are always emitted, with ``children=None`` when they have no
operations.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Optional

from specedit.document.dialect import try_detect_dialect
from specedit.models import Dialect, NodeType, Selection, SelectionType, TreeNode

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
CHANNEL_OPERATIONS = ("publish", "subscribe")


def _present(mapping: Any, key: str) -> bool:
    return isinstance(mapping, dict) and mapping.get(key) is not None


def _mapping(mapping: Any, key: str) -> dict[str, Any]:
    value = mapping.get(key) if isinstance(mapping, dict) else None
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class _Ids:
    """Hands out node ids, suffixing ``~2``, ``~3`` ... on collision."""

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def __call__(self, candidate: str) -> str:
        count = self._seen.get(candidate, 0) + 1
        self._seen[candidate] = count
        if count == 1:
            return candidate
        unique = f"{candidate}~{count}"
        while unique in self._seen:
            count += 1
            unique = f"{candidate}~{count}"
        self._seen[candidate] = count
        self._seen[unique] = 1
        return unique


def _section(
    ids: _Ids,
    node_id: str,
    label: str,
    node_type: NodeType,
    children: list[TreeNode],
    expanded: bool = False,
) -> Optional[TreeNode]:
    if not children:
        return None
    return TreeNode(
        id=ids(node_id),
        label=label,
        type=node_type,
        children=children,
        expanded=expanded,
    )


def _info_node(ids: _Ids, spec: dict[str, Any]) -> Optional[TreeNode]:
    if not _present(spec, "info"):
        return None
    return TreeNode(id=ids("info"), label="Info", type=NodeType.INFO)


def _named_leaves(
    ids: _Ids,
    items: dict[str, Any],
    prefix: str,
    node_type: NodeType,
    context_key: str,
) -> list[TreeNode]:
    return [
        TreeNode(
            id=ids(f"{prefix}-{name}"),
            label=str(name),
            type=node_type,
            path=str(name),
            context={context_key: str(name)},
        )
        for name in items
    ]


# ---------------------------------------------------------------------------
# OpenAPI 2.0 / 3.x
# ---------------------------------------------------------------------------


def _openapi_servers(ids: _Ids, spec: dict[str, Any]) -> list[TreeNode]:
    servers = spec.get("servers")
    if not isinstance(servers, list):
        return []
    children = []
    for index, server in enumerate(servers):
        server = server if isinstance(server, dict) else {}
        label = server.get("description") or server.get("url") or f"Server {index + 1}"
        children.append(
            TreeNode(
                id=ids(f"server-{index}"),
                label=str(label),
                type=NodeType.SERVER,
                path=str(index),
                context={"index": index},
            )
        )
    return children


def _operation_nodes(ids: _Ids, path_key: str, path_item: Any) -> list[TreeNode]:
    if not isinstance(path_item, dict):
        return []
    children = []
    for method in HTTP_METHODS:
        if path_item.get(method) is None:
            continue
        operation = path_item[method] if isinstance(path_item[method], dict) else {}
        operation_id = _text(operation.get("operationId"))
        summary = _text(operation.get("summary"))
        verb = method.upper()
        children.append(
            TreeNode(
                id=ids(f"path-{path_key}-{method}"),
                label=f"{verb}: {operation_id or summary or verb}",
                type=NodeType.OPERATION,
                path=path_key,
                context={"method": method, "operationId": operation_id, "summary": summary},
            )
        )
    return children


def _path_nodes(ids: _Ids, spec: dict[str, Any]) -> list[TreeNode]:
    nodes = []
    for path_key, path_item in _mapping(spec, "paths").items():
        path_key = str(path_key)
        node_id = ids(f"path-{path_key}")
        operations = _operation_nodes(ids, path_key, path_item)
        nodes.append(
            TreeNode(
                id=node_id,
                label=path_key,
                type=NodeType.PATH,
                path=path_key,
                children=operations or None,
            )
        )
    return nodes


def _tag_nodes(ids: _Ids, spec: dict[str, Any]) -> list[TreeNode]:
    tags = spec.get("tags")
    if not isinstance(tags, list):
        return []
    children = []
    for index, tag in enumerate(tags):
        tag = tag if isinstance(tag, dict) else {}
        name = tag.get("name")
        children.append(
            TreeNode(
                id=ids(f"tag-{name or index}"),
                label=str(name) if name else f"Tag {index + 1}",
                type=NodeType.TAG,
                path=str(name) if name else None,
                context={"tagName": name, "description": tag.get("description")},
            )
        )
    return children


def _build_openapi(spec: dict[str, Any], dialect: Dialect) -> list[TreeNode]:
    ids = _Ids()
    nodes: list[Optional[TreeNode]] = [_info_node(ids, spec)]

    nodes.append(_section(ids, "servers", "Servers", NodeType.SERVERS, _openapi_servers(ids, spec)))
    nodes.append(
        _section(ids, "paths", "Paths", NodeType.PATHS, _path_nodes(ids, spec), expanded=True)
    )

    if dialect is Dialect.OPENAPI_2:
        definitions = _named_leaves(
            ids, _mapping(spec, "definitions"), "definition", NodeType.SCHEMA, "schemaName"
        )
        nodes.append(
            _section(ids, "definitions", "Definitions", NodeType.SCHEMAS, definitions)
        )
        schemes = _mapping(spec, "securityDefinitions")
    else:
        components = _mapping(spec, "components")
        schemas = _named_leaves(
            ids, _mapping(components, "schemas"), "schema", NodeType.SCHEMA, "schemaName"
        )
        schemas_node = _section(ids, "schemas", "Schemas", NodeType.SCHEMAS, schemas)
        nodes.append(
            _section(
                ids,
                "components",
                "Components",
                NodeType.COMPONENTS,
                [schemas_node] if schemas_node else [],
            )
        )
        schemes = _mapping(components, "securitySchemes")

    security = _named_leaves(ids, schemes, "security", NodeType.SECURITY_SCHEME, "schemeName")
    nodes.append(_section(ids, "security", "Security", NodeType.SECURITY, security))
    nodes.append(_section(ids, "tags", "Tags", NodeType.TAGS, _tag_nodes(ids, spec)))
    return [node for node in nodes if node is not None]


# ---------------------------------------------------------------------------
# AsyncAPI 2.x
# ---------------------------------------------------------------------------


def _asyncapi_servers(ids: _Ids, spec: dict[str, Any]) -> list[TreeNode]:
    children = []
    for key, server in _mapping(spec, "servers").items():
        server = server if isinstance(server, dict) else {}
        children.append(
            TreeNode(
                id=ids(f"server-{key}"),
                label=str(server.get("description") or key),
                type=NodeType.SERVER,
                path=str(key),
                context={"serverKey": str(key)},
            )
        )
    return children


def _channel_nodes(ids: _Ids, spec: dict[str, Any]) -> list[TreeNode]:
    nodes = []
    for key, channel in _mapping(spec, "channels").items():
        key = str(key)
        node_id = ids(f"channel-{key}")
        operations = [
            TreeNode(
                id=ids(f"channel-{key}-{operation}"),
                label=operation,
                type=NodeType.OPERATION,
                path=key,
                context={"channelKey": key, "operation": operation},
            )
            for operation in CHANNEL_OPERATIONS
            if _present(channel, operation)
        ]
        nodes.append(
            TreeNode(
                id=node_id,
                label=key,
                type=NodeType.CHANNEL,
                path=key,
                children=operations or None,
            )
        )
    return nodes


def _build_asyncapi(spec: dict[str, Any]) -> list[TreeNode]:
    ids = _Ids()
    nodes: list[Optional[TreeNode]] = [_info_node(ids, spec)]
    nodes.append(_section(ids, "servers", "Servers", NodeType.SERVERS, _asyncapi_servers(ids, spec)))
    nodes.append(
        _section(
            ids, "channels", "Channels", NodeType.CHANNELS, _channel_nodes(ids, spec), expanded=True
        )
    )

    components = _mapping(spec, "components")
    messages = _named_leaves(
        ids, _mapping(components, "messages"), "message", NodeType.MESSAGE, "messageName"
    )
    schemas = _named_leaves(
        ids, _mapping(components, "schemas"), "schema", NodeType.SCHEMA, "schemaName"
    )
    groups = [
        _section(ids, "messages", "Messages", NodeType.MESSAGES, messages),
        _section(ids, "schemas", "Schemas", NodeType.SCHEMAS, schemas),
    ]
    nodes.append(
        _section(
            ids,
            "components",
            "Components",
            NodeType.COMPONENTS,
            [group for group in groups if group is not None],
        )
    )
    return [node for node in nodes if node is not None]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_navigation_tree(
    document: Any, dialect: Optional[Dialect] = None
) -> list[TreeNode]:
    """Build the ordered outline for *document*.

    Args:
        document: The canonical document tree. Not modified.
        dialect: Dialect of *document*. Detected when omitted.

    Returns:
        Top-level nodes in fixed section order; an empty list when the
        document is absent or its dialect is not recognised.
    """
    if not isinstance(document, dict):
        return []
    if dialect is None:
        dialect = try_detect_dialect(document)
    if dialect is None:
        return []
    if dialect.is_asyncapi:
        return _build_asyncapi(document)
    return _build_openapi(document, dialect)


def iter_nodes(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node depth-first, parents before children."""
    for node in nodes:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def find_node(nodes: Iterable[TreeNode], node_id: str) -> Optional[TreeNode]:
    for node in iter_nodes(nodes):
        if node.id == node_id:
            return node
    return None


def selection_for_node(node: TreeNode) -> Selection:
    """The selection a click on *node* produces."""
    return Selection(
        type=SelectionType(node.type.value),
        path=node.path,
        context=dict(node.context) if node.context else None,
    )
