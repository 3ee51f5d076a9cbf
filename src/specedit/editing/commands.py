"""Reversible edit commands and their dispatch functions.

The command set is closed: :data:`Command` is the union of five frozen
dataclasses, and every operation on a command (:func:`execute`,
:func:`undo`, :func:`describe`, :func:`can_merge`, :func:`merge`) is a plain
function dispatching on the variant through :data:`_HANDLERS`. Adding a
variant means adding it to the union and to that table.

Variants:

* :class:`ReplaceDocument` -- whole-document replacement. The before and
  after trees are deep-copied when the command is built, so later in-place
  edits of the live tree cannot leak into the snapshots. Each execute/undo
  installs a fresh copy of the snapshot.
* :class:`SetValue` -- set, create or delete (``new_value is MISSING``) the
  value at a stable path. Mapping levels created on execute are removed
  again on undo.
* :class:`InsertItem` / :class:`RemoveItem` -- list edits.
* :class:`RenameKey` -- rename a mapping key in place, keeping its position.

Field-level variants re-resolve their path against ``state.document`` on
every call and finish by calling
:meth:`~specedit.document.state.DocumentState.update_document` with the
mutated tree.

Commands are normally built through the factories in
:mod:`specedit.editing.edits`, which read the old values from the live tree.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Union

from specedit.document.state import DocumentState
from specedit.editing.pointer import (
    MISSING,
    DocumentPath,
    assign,
    clone,
    list_at,
    lookup,
    mapping_at,
    remove,
    rename,
    to_dotted,
)
from specedit.exceptions import CommandExecutionError


@dataclass(frozen=True)
class ReplaceDocument:
    """Replace the whole document with a frozen snapshot."""

    before: Any
    after: Any
    description: str


@dataclass(frozen=True)
class SetValue:
    """Set (or delete, when ``new_value`` is ``MISSING``) the value at ``path``.

    Attributes:
        path: Stable path of the edited value.
        old_value: Value before the edit, or ``MISSING`` when it did not exist.
        new_value: Value after the edit, or ``MISSING`` to delete.
        description: Label shown for undo/redo.
        created_at: Index of the first path segment that did not exist before
            the edit; undo removes the subtree rooted there. ``None`` when
            the whole path already existed.
        mergeable: Whether consecutive edits of the same path collapse into
            a single history entry.
    """

    path: DocumentPath
    old_value: Any
    new_value: Any
    description: str
    created_at: Optional[int] = None
    mergeable: bool = True


@dataclass(frozen=True)
class InsertItem:
    """Insert ``item`` at ``index`` into the list at ``path``.

    ``created_list`` records that the list did not exist and was created by
    this command; undo removes it again.
    """

    path: DocumentPath
    index: int
    item: Any
    description: str
    created_list: bool = False


@dataclass(frozen=True)
class RemoveItem:
    """Remove the item at ``index`` from the list at ``path``."""

    path: DocumentPath
    index: int
    item: Any
    description: str


@dataclass(frozen=True)
class RenameKey:
    """Rename ``old_key`` to ``new_key`` in the mapping at ``path``."""

    path: DocumentPath
    old_key: Any
    new_key: Any
    description: str


Command = Union[ReplaceDocument, SetValue, InsertItem, RemoveItem, RenameKey]


# ---------------------------------------------------------------------------
# Variant handlers
# ---------------------------------------------------------------------------


def _live(state: DocumentState) -> dict[str, Any]:
    if state.document is None:
        raise CommandExecutionError("No document is loaded")
    return state.document


def _replace_execute(command: ReplaceDocument, state: DocumentState) -> None:
    state.update_document(copy.deepcopy(command.after))


def _replace_undo(command: ReplaceDocument, state: DocumentState) -> None:
    state.update_document(copy.deepcopy(command.before))


def _set_execute(command: SetValue, state: DocumentState) -> None:
    document = _live(state)
    if command.new_value is MISSING:
        remove(document, command.path)
    else:
        assign(document, command.path, clone(command.new_value), create=True)
    state.update_document(document)


def _set_undo(command: SetValue, state: DocumentState) -> None:
    document = _live(state)
    if command.old_value is MISSING:
        created_at = command.created_at
        if created_at is None:
            created_at = len(command.path) - 1
        if lookup(document, command.path[: created_at + 1]) is not MISSING:
            remove(document, command.path[: created_at + 1])
    else:
        assign(document, command.path, clone(command.old_value), create=True)
    state.update_document(document)


def _insert_execute(command: InsertItem, state: DocumentState) -> None:
    document = _live(state)
    if command.created_list and lookup(document, command.path) is MISSING:
        assign(document, command.path, [clone(command.item)], create=True)
    else:
        items = list_at(document, command.path)
        items.insert(command.index, clone(command.item))
    state.update_document(document)


def _insert_undo(command: InsertItem, state: DocumentState) -> None:
    document = _live(state)
    items = list_at(document, command.path)
    if not 0 <= command.index < len(items):
        raise CommandExecutionError(
            f"List index out of range: {to_dotted(command.path)}.{command.index}"
        )
    items.pop(command.index)
    if command.created_list and not items:
        remove(document, command.path)
    state.update_document(document)


def _remove_execute(command: RemoveItem, state: DocumentState) -> None:
    document = _live(state)
    items = list_at(document, command.path)
    if not 0 <= command.index < len(items):
        raise CommandExecutionError(
            f"List index out of range: {to_dotted(command.path)}.{command.index}"
        )
    items.pop(command.index)
    state.update_document(document)


def _remove_undo(command: RemoveItem, state: DocumentState) -> None:
    document = _live(state)
    items = list_at(document, command.path)
    items.insert(command.index, clone(command.item))
    state.update_document(document)


def _rename_execute(command: RenameKey, state: DocumentState) -> None:
    document = _live(state)
    rename(mapping_at(document, command.path), command.old_key, command.new_key)
    state.update_document(document)


def _rename_undo(command: RenameKey, state: DocumentState) -> None:
    document = _live(state)
    rename(mapping_at(document, command.path), command.new_key, command.old_key)
    state.update_document(document)


_Handler = Callable[[Any, DocumentState], None]

_HANDLERS: dict[type, tuple[_Handler, _Handler]] = {
    ReplaceDocument: (_replace_execute, _replace_undo),
    SetValue: (_set_execute, _set_undo),
    InsertItem: (_insert_execute, _insert_undo),
    RemoveItem: (_remove_execute, _remove_undo),
    RenameKey: (_rename_execute, _rename_undo),
}


def _handlers_for(command: Command) -> tuple[_Handler, _Handler]:
    try:
        return _HANDLERS[type(command)]
    except KeyError:
        raise TypeError(f"Unknown command type: {type(command).__name__}") from None


# ---------------------------------------------------------------------------
# Public dispatch
# ---------------------------------------------------------------------------


def execute(command: Command, state: DocumentState) -> None:
    """Perform *command* against the document held by *state*."""
    run, _ = _handlers_for(command)
    run(command, state)


def undo(command: Command, state: DocumentState) -> None:
    """Reverse *command* against the document held by *state*."""
    _, revert = _handlers_for(command)
    revert(command, state)


def describe(command: Command) -> str:
    """Human-readable label of *command* for undo/redo menus."""
    _handlers_for(command)
    return command.description


def can_merge(previous: Command, following: Command) -> bool:
    """Whether *following* can be folded into *previous* as one history entry.

    Only :class:`SetValue` edits of the same path merge, and only when both
    are marked mergeable.
    """
    return (
        isinstance(previous, SetValue)
        and isinstance(following, SetValue)
        and previous.mergeable
        and following.mergeable
        and previous.path == following.path
    )


def merge(previous: Command, following: Command) -> Command:
    """Fold *following* into *previous*.

    The merged command keeps the oldest "before" state and the newest
    "after" state, so a single undo reverses both edits.

    Raises:
        ValueError: If :func:`can_merge` is false for the pair.
    """
    if not can_merge(previous, following):
        raise ValueError(
            f"Cannot merge {type(following).__name__} into {type(previous).__name__}"
        )
    assert isinstance(previous, SetValue) and isinstance(following, SetValue)
    return replace(
        previous,
        new_value=following.new_value,
        description=following.description,
    )
