"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specedit.exceptions.SpeceditError` subclass.
Scripts wrapping the ``specedit`` CLI can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ specedit inspect outline broken.yaml
    $ echo $?
    7   # EXIT_PARSE_ERROR -- the document could not be parsed
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an edit could not be built."""

EXIT_HOST_ERROR = 6
"""Reading or writing through the host collaborator failed or timed out."""

EXIT_PARSE_ERROR = 7
"""The specification document could not be parsed or its dialect is unknown."""

EXIT_SERIALIZE_ERROR = 8
"""The document tree could not be rendered back to JSON or YAML."""

EXIT_COMMAND_ERROR = 9
"""An edit command failed while executing or undoing."""
