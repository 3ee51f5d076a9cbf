"""Stable document paths and in-place tree surgery.

A :data:`DocumentPath` is a tuple of mapping keys and list indices, e.g.
``("paths", "/users", "get", "summary")`` or ``("servers", 0, "url")``.
Commands store paths, never node references, and re-resolve them on every
execute/undo so that they tolerate reordering done in between.

JSON-pointer strings (RFC 6901, ``/paths/~1users/get``) are accepted
wherever a path is and converted by :func:`to_path`.

All helpers raise :class:`~specedit.exceptions.CommandExecutionError` when
a path cannot be resolved. Mutating helpers resolve and check everything
they need before touching the tree, so a failure leaves it unchanged.
"""

from __future__ import annotations

import copy
from typing import Any, Union

from specedit.exceptions import CommandExecutionError

Segment = Union[str, int]
DocumentPath = tuple[Segment, ...]
PathLike = Union[str, DocumentPath, list]


class _Missing:
    """Sentinel for "no value at this path"."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self


MISSING: Any = _Missing()


# --- Conversions ---


def to_path(path: PathLike) -> DocumentPath:
    """Normalise a tuple/list path or a JSON-pointer string into a tuple."""
    if isinstance(path, str):
        if path == "":
            return ()
        if not path.startswith("/"):
            raise CommandExecutionError(f"JSON pointer must start with '/': {path!r}")
        return tuple(
            token.replace("~1", "/").replace("~0", "~") for token in path[1:].split("/")
        )
    return tuple(path)


def to_pointer(path: PathLike) -> str:
    """Render a path as a JSON-pointer string."""
    tokens = to_path(path)
    return "".join(
        "/" + str(token).replace("~", "~0").replace("/", "~1") for token in tokens
    )


def to_dotted(path: PathLike) -> str:
    """Render a path in the dotted form used by validation problems."""
    return ".".join(str(token) for token in to_path(path))


# --- Resolution ---


def _key_in(container: Any, segment: Segment) -> Segment | _Missing:
    """Return the actual key/index for *segment* inside *container*, or MISSING.

    Mapping keys parsed from YAML may be integers (``200:``) while a pointer
    yields strings, so both spellings are tried.
    """
    if isinstance(container, dict):
        if segment in container:
            return segment
        if isinstance(segment, int) and str(segment) in container:
            return str(segment)
        if isinstance(segment, str) and segment.isdigit() and int(segment) in container:
            return int(segment)
        return MISSING
    if isinstance(container, list):
        try:
            index = int(segment)
        except (TypeError, ValueError):
            raise CommandExecutionError(
                f"List index expected, got {segment!r}"
            ) from None
        if 0 <= index < len(container):
            return index
        return MISSING
    raise CommandExecutionError(
        f"Cannot descend into {type(container).__name__} with {segment!r}"
    )


def lookup(document: Any, path: PathLike, default: Any = MISSING) -> Any:
    """Return the value at *path*, or *default* when any segment is absent."""
    node = document
    for segment in to_path(path):
        if not isinstance(node, (dict, list)):
            return default
        try:
            key = _key_in(node, segment)
        except CommandExecutionError:
            return default
        if key is MISSING:
            return default
        node = node[key]
    return node


def first_missing(document: Any, path: PathLike) -> int | None:
    """Index of the first segment of *path* that does not exist, or ``None``."""
    node = document
    for depth, segment in enumerate(to_path(path)):
        if not isinstance(node, (dict, list)):
            return depth
        try:
            key = _key_in(node, segment)
        except CommandExecutionError:
            return depth
        if key is MISSING:
            return depth
        node = node[key]
    return None


def resolve(document: Any, path: PathLike) -> Any:
    """Return the value at *path* or raise :class:`CommandExecutionError`."""
    value = lookup(document, path)
    if value is MISSING:
        raise CommandExecutionError(f"Path not found: {to_dotted(path) or '<root>'}")
    return value


def _container(document: Any, path: DocumentPath, create: bool) -> Any:
    """Resolve the container at *path*, optionally creating missing mappings."""
    node = document
    for depth, segment in enumerate(path):
        key = _key_in(node, segment)
        if key is MISSING:
            remaining = path[depth:]
            if not create:
                raise CommandExecutionError(f"Path not found: {to_dotted(path[: depth + 1])}")
            if not isinstance(node, dict) or not all(isinstance(s, str) for s in remaining):
                raise CommandExecutionError(
                    f"Cannot create missing path segment(s): {to_dotted(remaining)}"
                )
            for name in remaining:
                node[name] = {}
                node = node[name]
            return node
        node = node[key]
    if not isinstance(node, (dict, list)):
        raise CommandExecutionError(
            f"Not a container: {to_dotted(path) or '<root>'} is {type(node).__name__}"
        )
    return node


# --- Mutation ---


def clone(value: Any) -> Any:
    """Deep-copy container values; scalars are returned as-is."""
    if isinstance(value, (dict, list)):
        return copy.deepcopy(value)
    return value


def assign(document: Any, path: PathLike, value: Any, create: bool = True) -> None:
    """Set the value at *path*, creating missing parent mappings when *create* is true."""
    tokens = to_path(path)
    if not tokens:
        raise CommandExecutionError("Cannot assign to the document root")
    parent = _container(document, tokens[:-1], create)
    segment = tokens[-1]
    if isinstance(parent, list):
        key = _key_in(parent, segment)
        if key is MISSING:
            raise CommandExecutionError(f"List index out of range: {to_dotted(tokens)}")
        parent[key] = value
        return
    key = _key_in(parent, segment)
    parent[segment if key is MISSING else key] = value


def remove(document: Any, path: PathLike) -> Any:
    """Delete and return the value at *path*."""
    tokens = to_path(path)
    if not tokens:
        raise CommandExecutionError("Cannot remove the document root")
    parent = _container(document, tokens[:-1], create=False)
    key = _key_in(parent, tokens[-1])
    if key is MISSING:
        raise CommandExecutionError(f"Path not found: {to_dotted(tokens)}")
    return parent.pop(key)


def list_at(document: Any, path: PathLike) -> list:
    value = resolve(document, path)
    if not isinstance(value, list):
        raise CommandExecutionError(f"Not a list: {to_dotted(path)}")
    return value


def mapping_at(document: Any, path: PathLike) -> dict:
    value = resolve(document, path) if to_path(path) else document
    if not isinstance(value, dict):
        raise CommandExecutionError(f"Not a mapping: {to_dotted(path) or '<root>'}")
    return value


def rename(mapping: dict, old_key: Any, new_key: Any) -> None:
    """Rename *old_key* to *new_key* in place, keeping its position."""
    if old_key not in mapping:
        raise CommandExecutionError(f"Key not found: {old_key!r}")
    if new_key in mapping:
        raise CommandExecutionError(f"Key already exists: {new_key!r}")
    items = [(new_key if key == old_key else key, value) for key, value in mapping.items()]
    mapping.clear()
    mapping.update(items)
