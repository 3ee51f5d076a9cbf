"""Edit commands -- apply one undoable edit to a document and save it.

Provides the ``specedit edit`` sub-command group. Each sub-command loads
the document into an :class:`~specedit.session.EditorSession`, executes a
single field-level command through the command history and writes the
result back in the document's original format. ``--dry-run`` prints the
edited document to stdout instead of saving.

Locations are JSON pointers (``/info/title``, ``/paths/~1pets/get/summary``).
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import typer

from specedit.commands import fail, open_session
from specedit.document.service import serialize_document
from specedit.editing import edits
from specedit.editing.commands import Command
from specedit.exceptions import InvalidUsageError, SerializeError, SpeceditError
from specedit.output import get_output, success
from specedit.session import EditorSession


edit_app = typer.Typer(no_args_is_help=True)


def _check_pointer(pointer: str) -> None:
    if not pointer.startswith("/"):
        fail(InvalidUsageError(f"Location must be a JSON pointer starting with '/': {pointer}"))


def _parse_value(raw: str, as_json: bool) -> Any:
    if not as_json:
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        fail(InvalidUsageError(f"Value is not valid JSON: {exc}"))


def _apply(session: EditorSession, command: Command, file: str, dry_run: bool) -> None:
    try:
        session.execute(command)
    except SpeceditError as exc:
        fail(exc)

    if dry_run:
        try:
            text = serialize_document(session.document, session.state.format)
        except SpeceditError as exc:
            fail(exc)
        get_output().print_document(text, session.state.format.value)
        return

    try:
        asyncio.run(session.save())
    except SerializeError as exc:
        # Already reported through the host.
        raise typer.Exit(code=exc.exit_code) from None
    except SpeceditError as exc:
        fail(exc)
    success(f"{session.history.get_undo_description()} ({file})")


@edit_app.command("set")
def edit_set(
    ctx: typer.Context,
    file: str = typer.Argument(help="Path of the document to edit."),
    pointer: str = typer.Argument(help="JSON pointer of the value, e.g. /info/title."),
    value: str = typer.Argument(help="New value (a string unless --json-value is given)."),
    json_value: bool = typer.Option(
        False, "--json-value", help="Parse VALUE as JSON (numbers, booleans, objects)."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the edited document instead of saving."
    ),
) -> None:
    """Set the value at a JSON pointer, creating missing parent objects.

    Example::

        specedit edit set petstore.yaml /info/title "Pet Store"
        specedit edit set api.json /info/x-internal true --json-value
    """
    _check_pointer(pointer)
    parsed = _parse_value(value, json_value)
    session = open_session(ctx, file)
    try:
        command = edits.set_value(session.document, pointer, parsed)
    except SpeceditError as exc:
        fail(exc)
    _apply(session, command, file, dry_run)


@edit_app.command("delete")
def edit_delete(
    ctx: typer.Context,
    file: str = typer.Argument(help="Path of the document to edit."),
    pointer: str = typer.Argument(help="JSON pointer of the value to remove."),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the edited document instead of saving."
    ),
) -> None:
    """Remove the value at a JSON pointer.

    Example::

        specedit edit delete petstore.yaml /paths/~1pets/get/deprecated
    """
    _check_pointer(pointer)
    session = open_session(ctx, file)
    try:
        command = edits.delete_value(session.document, pointer)
    except SpeceditError as exc:
        fail(exc)
    _apply(session, command, file, dry_run)
