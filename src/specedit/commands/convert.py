"""Convert command -- re-serialize a document as JSON or YAML."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from specedit.commands import fail, open_session
from specedit.document.service import serialize_document
from specedit.exceptions import SpeceditError
from specedit.models import DocumentFormat
from specedit.output import get_output, success


def convert_command(
    ctx: typer.Context,
    file: str = typer.Argument(help="Path or URL of the document."),
    to: DocumentFormat = typer.Option(..., "--to", help="Target format: json or yaml."),
    output_path: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write to this file instead of stdout."
    ),
) -> None:
    """Convert a document between JSON and YAML, keeping key order.

    Example::

        specedit convert petstore.yaml --to json
        specedit convert petstore.json --to yaml -o petstore.yaml
    """
    session = open_session(ctx, file)
    try:
        text = serialize_document(session.document, to)
    except SpeceditError as exc:
        fail(exc)

    if output_path is None:
        get_output().print_document(text, to.value)
        return

    try:
        asyncio.run(session.host.write_file(output_path, text))
    except SpeceditError as exc:
        fail(exc)
    success(f"Wrote {to.value.upper()} to {output_path}")
