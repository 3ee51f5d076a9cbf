"""Typer application and CLI entry point for specedit.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``inspect``, ``edit``, ``convert``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, registers commands and
invokes the Typer app. :class:`~specedit.exceptions.SpeceditError`
instances exit cleanly with their own exit code; any other exception is
written to a crash log under the data directory.

See Also:
    :mod:`specedit.config`: Configuration resolution done in :func:`main_callback`.
    :mod:`specedit.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specedit import __version__
from specedit.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specedit",
    help="Inspect and edit OpenAPI and AsyncAPI documents with undoable commands.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specedit {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route ``specedit`` library logs to stderr through Rich when verbose."""
    logger = logging.getLogger("specedit")
    if not verbose:
        logger.setLevel(logging.WARNING)
        return

    from rich.console import Console
    from rich.logging import RichHandler

    logger.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    max_history: Optional[int] = typer.Option(
        None, "--max-history", help="Maximum number of undoable commands."
    ),
    read_timeout: Optional[float] = typer.Option(
        None, "--read-timeout", help="Seconds to wait when reading a document."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~specedit.output.OutputManager` from
    CLI flags, resolves the effective configuration and stores it in
    ``ctx.obj["config"]`` for sub-commands.
    """
    from specedit.config import resolve_config
    from specedit.exceptions import ConfigError
    from specedit.output import OutputFormat, OutputManager, error, set_output

    _configure_logging(verbose)

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config = resolve_config(
            cli_format=cli_format,
            cli_max_history=max_history,
            cli_read_timeout=read_timeout,
        )
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        fmt = OutputFormat.AUTO

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from specedit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def register_commands() -> None:
    """Attach the built-in sub-commands to :data:`app` (idempotent)."""
    if getattr(app, "_specedit_registered", False):
        return
    from specedit.commands.config import config_app
    from specedit.commands.convert import convert_command
    from specedit.commands.edit import edit_app
    from specedit.commands.inspect import inspect_app

    app.add_typer(inspect_app, name="inspect", help="Inspect a document.")
    app.add_typer(edit_app, name="edit", help="Apply undoable edits to a document.")
    app.command("convert")(convert_command)
    app.add_typer(config_app, name="config", help="Configuration management.")
    app._specedit_registered = True  # type: ignore[attr-defined]


def main() -> None:
    """CLI entry point invoked by the ``specedit`` console script.

    Unhandled :class:`~specedit.exceptions.SpeceditError` instances cause
    a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app(standalone_mode=True)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specedit.exceptions import SpeceditError
        from specedit.output import error

        if isinstance(exc, SpeceditError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
