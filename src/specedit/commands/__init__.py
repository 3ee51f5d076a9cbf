"""Built-in CLI sub-commands for specedit.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~specedit.commands.inspect` -- document info, outline and problems.
* :mod:`~specedit.commands.edit` -- apply one undoable edit and save.
* :mod:`~specedit.commands.convert` -- re-serialize as JSON or YAML.
* :mod:`~specedit.commands.config` -- view and modify global settings.

Commands open documents through :func:`open_session`, which builds an
:class:`~specedit.session.EditorSession` on a
:class:`~specedit.host.local.LocalHost` with the configuration resolved in
:func:`~specedit.app.main_callback`.
"""

from __future__ import annotations

import asyncio
from typing import NoReturn

import typer

from specedit.exceptions import ParseError, SpeceditError
from specedit.host.local import LocalHost
from specedit.models import GlobalConfig
from specedit.output import error
from specedit.session import EditorSession


def config_from(ctx: typer.Context) -> GlobalConfig:
    config = ctx.obj.get("config") if ctx.obj else None
    return config if isinstance(config, GlobalConfig) else GlobalConfig()


def fail(exc: SpeceditError) -> NoReturn:
    """Report *exc* on stderr and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def open_session(ctx: typer.Context, uri: str) -> EditorSession:
    """Load *uri* into a fresh session, exiting with the error's code on failure."""
    session = EditorSession(LocalHost(), config_from(ctx))
    try:
        asyncio.run(session.open(uri))
    except ParseError as exc:
        # Already reported through the host.
        raise typer.Exit(code=exc.exit_code) from None
    except SpeceditError as exc:
        fail(exc)
    return session
