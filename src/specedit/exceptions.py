"""Exception hierarchy for specedit.

All exceptions inherit from :class:`SpeceditError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specedit.exit_codes`.
The top-level error handler in :func:`specedit.app.main` catches
``SpeceditError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpeceditError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- HostError              (exit 6)
    |   +-- HostTimeoutError   (exit 6)
    +-- ParseError             (exit 7)
    +-- SerializeError         (exit 8)
    +-- CommandExecutionError  (exit 9)
    +-- ConfigError            (exit 1)
"""

from specedit.exit_codes import (
    EXIT_COMMAND_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_HOST_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_PARSE_ERROR,
    EXIT_SERIALIZE_ERROR,
)


class SpeceditError(Exception):
    """Base exception for all specedit errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specedit.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpeceditError):
    """Raised for invalid CLI arguments or edits that cannot be constructed."""

    exit_code = EXIT_INVALID_USAGE


class HostError(SpeceditError):
    """Raised when the host collaborator fails to read or write a resource."""

    exit_code = EXIT_HOST_ERROR


class HostTimeoutError(HostError):
    """Raised when reading the initial document content exceeds its timeout.

    There is no retry: the load attempt fails and the caller decides what
    to do next.
    """


class ParseError(SpeceditError):
    """Raised for malformed JSON/YAML or content without a known dialect discriminator.

    A failed parse never installs a partial document into the
    :class:`~specedit.document.state.DocumentState`.
    """

    exit_code = EXIT_PARSE_ERROR


class SerializeError(SpeceditError):
    """Raised when the document tree cannot be rendered back to text."""

    exit_code = EXIT_SERIALIZE_ERROR


class CommandExecutionError(SpeceditError):
    """Raised when a command fails inside ``execute`` or ``undo``.

    The :class:`~specedit.editing.history.CommandHistory` re-raises this
    error after restoring its idle state; neither stack is modified by a
    failed attempt.
    """

    exit_code = EXIT_COMMAND_ERROR


class ConfigError(SpeceditError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
