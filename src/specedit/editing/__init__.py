"""Reversible editing: stable paths, the command union, edit factories and history."""

from specedit.editing.commands import (
    Command,
    InsertItem,
    RemoveItem,
    RenameKey,
    ReplaceDocument,
    SetValue,
)
from specedit.editing.history import CommandHistory
from specedit.editing.pointer import MISSING, lookup, to_path, to_pointer

__all__ = [
    "MISSING",
    "Command",
    "CommandHistory",
    "InsertItem",
    "RemoveItem",
    "RenameKey",
    "ReplaceDocument",
    "SetValue",
    "lookup",
    "to_path",
    "to_pointer",
]
