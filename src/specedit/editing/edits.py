"""Factories that build commands from the live document.

Each factory reads whatever the command needs to undo itself (old values,
removed items) from *document* at construction time and returns an
immutable command from :mod:`specedit.editing.commands`. Nothing is
mutated until the command is passed to
:meth:`~specedit.editing.history.CommandHistory.execute_command`.

Paths may be tuples or JSON-pointer strings. Edits that cannot be built
(adding a path that already exists, removing one that does not) raise
:class:`~specedit.exceptions.InvalidUsageError`.

The generic factories are :func:`set_value`, :func:`delete_value`,
:func:`insert_item`, :func:`remove_item`, :func:`rename_key` and
:func:`replace_document`; the rest are named editor operations on top of
them (info/contact/license fields, tags, servers, paths and operations).
"""

from __future__ import annotations

import copy
from typing import Any, Optional, Union

from specedit.editing.commands import (
    InsertItem,
    RemoveItem,
    RenameKey,
    ReplaceDocument,
    SetValue,
)
from specedit.editing.pointer import (
    MISSING,
    PathLike,
    clone,
    first_missing,
    lookup,
    to_dotted,
    to_path,
)
from specedit.exceptions import InvalidUsageError

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


# ---------------------------------------------------------------------------
# Generic factories
# ---------------------------------------------------------------------------


def replace_document(before: Any, after: Any, description: str) -> ReplaceDocument:
    """Snapshot *before* and *after* now; later edits to either tree do not leak in."""
    return ReplaceDocument(
        before=copy.deepcopy(before),
        after=copy.deepcopy(after),
        description=description,
    )


def set_value(
    document: Any,
    path: PathLike,
    value: Any,
    description: Optional[str] = None,
    mergeable: bool = True,
) -> SetValue:
    """Set the value at *path*, creating missing parent mappings on execute."""
    tokens = to_path(path)
    if not tokens:
        raise InvalidUsageError("Use replace_document() to replace the whole document")
    return SetValue(
        path=tokens,
        old_value=clone(lookup(document, tokens)),
        new_value=clone(value),
        description=description or f"Update {to_dotted(tokens)}",
        created_at=first_missing(document, tokens),
        mergeable=mergeable,
    )


def delete_value(
    document: Any, path: PathLike, description: Optional[str] = None
) -> SetValue:
    """Delete the value at *path*. The value must exist."""
    tokens = to_path(path)
    old_value = lookup(document, tokens)
    if not tokens or old_value is MISSING:
        raise InvalidUsageError(f"Nothing to delete at {to_dotted(tokens) or '<root>'}")
    return SetValue(
        path=tokens,
        old_value=clone(old_value),
        new_value=MISSING,
        description=description or f"Remove {to_dotted(tokens)}",
        mergeable=False,
    )


def insert_item(
    document: Any,
    path: PathLike,
    item: Any,
    index: Optional[int] = None,
    description: Optional[str] = None,
) -> InsertItem:
    """Insert *item* into the list at *path* (appending when *index* is ``None``).

    A missing list is created on execute, provided its parent exists, and
    removed again on undo.
    """
    tokens = to_path(path)
    current = lookup(document, tokens)
    if current is MISSING:
        if not tokens or lookup(document, tokens[:-1]) is MISSING:
            raise InvalidUsageError(f"Parent of {to_dotted(tokens)} does not exist")
        size, created = 0, True
    elif isinstance(current, list):
        size, created = len(current), False
    else:
        raise InvalidUsageError(f"Not a list: {to_dotted(tokens)}")

    position = size if index is None else index
    if not 0 <= position <= size:
        raise InvalidUsageError(f"Index {position} out of range for {to_dotted(tokens)}")
    return InsertItem(
        path=tokens,
        index=position,
        item=clone(item),
        description=description or f"Add item to {to_dotted(tokens)}",
        created_list=created,
    )


def remove_item(
    document: Any, path: PathLike, index: int, description: Optional[str] = None
) -> RemoveItem:
    """Remove the item at *index* from the list at *path*."""
    tokens = to_path(path)
    current = lookup(document, tokens)
    if not isinstance(current, list) or not 0 <= index < len(current):
        raise InvalidUsageError(f"No item {index} in {to_dotted(tokens)}")
    return RemoveItem(
        path=tokens,
        index=index,
        item=clone(current[index]),
        description=description or f"Remove item {index} from {to_dotted(tokens)}",
    )


def rename_key(
    document: Any,
    path: PathLike,
    old_key: str,
    new_key: str,
    description: Optional[str] = None,
) -> RenameKey:
    """Rename a key of the mapping at *path*, keeping its position."""
    tokens = to_path(path)
    mapping = lookup(document, tokens) if tokens else document
    if not isinstance(mapping, dict) or old_key not in mapping:
        raise InvalidUsageError(f'"{old_key}" does not exist in {to_dotted(tokens) or "<root>"}')
    if new_key in mapping:
        raise InvalidUsageError(f'"{new_key}" already exists in {to_dotted(tokens) or "<root>"}')
    return RenameKey(
        path=tokens,
        old_key=old_key,
        new_key=new_key,
        description=description or f"Rename {old_key} -> {new_key}",
    )


# ---------------------------------------------------------------------------
# Info
# ---------------------------------------------------------------------------


def set_info_field(document: Any, field: str, value: Any) -> SetValue:
    """Edit ``info.<field>`` (title, version, description, termsOfService, ...)."""
    return set_value(document, ("info", field), value, f"Update {field}: {value}")


def set_contact_field(document: Any, field: str, value: Any) -> SetValue:
    return set_value(document, ("info", "contact", field), value, f"Update contact {field}: {value}")


def set_license_field(document: Any, field: str, value: Any) -> SetValue:
    return set_value(document, ("info", "license", field), value, f"Update license {field}: {value}")


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


def _tag_name(document: Any, index: int) -> str:
    tag = lookup(document, ("tags", index))
    if not isinstance(tag, dict):
        raise InvalidUsageError(f"No tag at index {index}")
    return str(tag.get("name", ""))


def add_tag(document: Any, name: str, description: Optional[str] = None) -> InsertItem:
    tag: dict[str, Any] = {"name": name}
    if description:
        tag["description"] = description
    return insert_item(document, ("tags",), tag, description=f"Add tag: {name}")


def remove_tag(document: Any, index: int) -> RemoveItem:
    name = _tag_name(document, index)
    return remove_item(document, ("tags",), index, f"Remove tag: {name}")


def remove_all_tags(document: Any) -> SetValue:
    return set_value(document, ("tags",), [], "Remove all tags", mergeable=False)


def rename_tag(document: Any, index: int, new_name: str) -> SetValue:
    old_name = _tag_name(document, index)
    return set_value(
        document, ("tags", index, "name"), new_name, f"Update tag name: {old_name} -> {new_name}"
    )


def set_tag_description(document: Any, index: int, description: str) -> SetValue:
    name = _tag_name(document, index)
    return set_value(
        document, ("tags", index, "description"), description, f"Update tag description: {name}"
    )


# ---------------------------------------------------------------------------
# Servers
# ---------------------------------------------------------------------------


def add_server(document: Any, url: str, description: Optional[str] = None) -> InsertItem:
    """Append an OpenAPI 3.x server entry."""
    server: dict[str, Any] = {"url": url}
    if description:
        server["description"] = description
    return insert_item(document, ("servers",), server, description=f"Add server: {url}")


def remove_server(document: Any, index: int) -> RemoveItem:
    url = lookup(document, ("servers", index, "url"), "")
    return remove_item(document, ("servers",), index, f"Remove server: {url}")


def set_server_url(document: Any, server: Union[int, str], url: str) -> SetValue:
    """Edit a server URL; *server* is a list index (OpenAPI) or a server name (AsyncAPI)."""
    if lookup(document, ("servers", server)) is MISSING:
        raise InvalidUsageError(f"No server {server!r}")
    return set_value(document, ("servers", server, "url"), url, f"Update server URL: {url}")


# ---------------------------------------------------------------------------
# Paths and operations
# ---------------------------------------------------------------------------


def _require_path(document: Any, name: str) -> dict[str, Any]:
    item = lookup(document, ("paths", name))
    if not isinstance(item, dict):
        raise InvalidUsageError(f'Path "{name}" does not exist.')
    return item


def add_path(document: Any, name: str) -> SetValue:
    name = name.strip()
    if lookup(document, ("paths", name)) is not MISSING:
        raise InvalidUsageError(f'Path "{name}" already exists.')
    return set_value(document, ("paths", name), {}, f"Add path: {name}", mergeable=False)


def delete_path(document: Any, name: str) -> SetValue:
    _require_path(document, name)
    return delete_value(document, ("paths", name), f"Delete path: {name}")


def clone_path(document: Any, source: str, target: str) -> SetValue:
    target = target.strip()
    item = _require_path(document, source)
    if lookup(document, ("paths", target)) is not MISSING:
        raise InvalidUsageError(f'Path "{target}" already exists.')
    return set_value(
        document, ("paths", target), item, f"Clone path: {source} -> {target}", mergeable=False
    )


def rename_path(document: Any, old_name: str, new_name: str) -> RenameKey:
    return rename_key(document, ("paths",), old_name, new_name.strip(), f"Rename path: {old_name} -> {new_name}")


def set_path_summary(document: Any, name: str, summary: str) -> SetValue:
    _require_path(document, name)
    return set_value(document, ("paths", name, "summary"), summary, f"Update path summary: {name}")


def set_operation_field(
    document: Any, path_name: str, method: str, field: str, value: Any
) -> SetValue:
    """Edit a field (summary, description, operationId, ...) of one operation."""
    method = method.lower()
    if method not in HTTP_METHODS:
        raise InvalidUsageError(f"Unknown HTTP method: {method}")
    item = _require_path(document, path_name)
    if not isinstance(item.get(method), dict):
        raise InvalidUsageError(f"Operation {method.upper()} {path_name} does not exist.")
    return set_value(
        document,
        ("paths", path_name, method, field),
        value,
        f"Update operation {field}: {method.upper()} {path_name}",
    )


def add_path_server(document: Any, name: str, url: str = "", description: str = "") -> InsertItem:
    _require_path(document, name)
    return insert_item(
        document,
        ("paths", name, "servers"),
        {"url": url, "description": description},
        description="Add server to path",
    )


def remove_path_server(document: Any, name: str, index: int) -> RemoveItem:
    _require_path(document, name)
    url = lookup(document, ("paths", name, "servers", index, "url"), "")
    return remove_item(document, ("paths", name, "servers"), index, f"Remove server: {url}")
