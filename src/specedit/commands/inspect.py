"""Inspect commands -- examine a specification document.

Provides the ``specedit inspect`` sub-command group with read-only
commands: general document info, the navigation outline and the minimal
validation problems. Every sub-command loads the document through an
:class:`~specedit.session.EditorSession`, so what is shown is exactly what
the editor sees.
"""

from __future__ import annotations

import typer

from specedit.commands import open_session
from specedit.exit_codes import EXIT_GENERIC_FAILURE
from specedit.navigation.tree import iter_nodes
from specedit.output import (
    OutputFormat,
    format_data,
    get_output,
    print_table,
    print_tree,
    success,
)


inspect_app = typer.Typer(no_args_is_help=True)


@inspect_app.command("info")
def inspect_info(
    ctx: typer.Context,
    file: str = typer.Argument(help="Path or URL of the document."),
) -> None:
    """Show the document type, dialect, version and format.

    Example::

        specedit inspect info petstore.yaml
        specedit --json inspect info https://example.com/openapi.json
    """
    session = open_session(ctx, file)
    document = session.document
    info = document.get("info") if isinstance(document.get("info"), dict) else {}
    format_data(
        {
            "uri": file,
            "type": session.state.type_name,
            "dialect": session.state.dialect.value if session.state.dialect else None,
            "version": session.service.get_document_version(document),
            "format": session.state.format.value if session.state.format else None,
            "title": info.get("title"),
            "api_version": info.get("version"),
            "nodes": sum(1 for _ in iter_nodes(session.tree)),
        }
    )


@inspect_app.command("outline")
def inspect_outline(
    ctx: typer.Context,
    file: str = typer.Argument(help="Path or URL of the document."),
) -> None:
    """Print the navigation outline of the document.

    Example::

        specedit inspect outline petstore.yaml
        specedit --plain inspect outline asyncapi.yaml
    """
    session = open_session(ctx, file)
    print_tree(session.tree, title=session.state.type_name or file)


@inspect_app.command("problems")
def inspect_problems(
    ctx: typer.Context,
    file: str = typer.Argument(help="Path or URL of the document."),
    strict: bool = typer.Option(
        False, "--strict", help="Exit with status 1 when any error or warning is found."
    ),
) -> None:
    """List minimal structural validation problems.

    Example::

        specedit inspect problems petstore.yaml
        specedit inspect problems --strict broken.json
    """
    session = open_session(ctx, file)
    problems = session.validation.problems
    if not problems:
        success("No problems")
        if get_output().format == OutputFormat.JSON:
            format_data([])
        return

    print_table(
        ["id", "severity", "message", "path"],
        [[p.id, p.severity.value, p.message, p.path or ""] for p in problems],
        title=f"Problems ({len(problems)})",
    )
    store = session.validation
    if strict and (store.error_count() or store.warning_count()):
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)
