"""Bounded undo/redo history over the command union."""

from __future__ import annotations

import logging
from typing import Optional

from specedit.document.state import DocumentState
from specedit.editing import commands
from specedit.editing.commands import Command
from specedit.exceptions import CommandExecutionError

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 100


class CommandHistory:
    """Executes commands against a :class:`DocumentState` and records them.

    Consecutive mergeable edits of the same path collapse into one undo
    step. The undo stack holds at most ``max_history_size`` entries; the
    oldest is evicted first. Executing a new command clears the redo stack.

    A command that raises leaves both stacks untouched, the document is
    rolled back to its state before the call and the error is re-raised
    as :class:`CommandExecutionError`. This also covers a state listener
    raising after the command has already changed the tree. Calls made while another
    command is still running (for example from a state listener) are
    ignored with a warning.
    """

    def __init__(
        self, state: DocumentState, max_history_size: int = DEFAULT_MAX_HISTORY
    ) -> None:
        self._state = state
        self._undo: list[Command] = []
        self._redo: list[Command] = []
        self._max_history_size = max(1, int(max_history_size))
        self._executing = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def undo_stack(self) -> tuple[Command, ...]:
        return tuple(self._undo)

    @property
    def redo_stack(self) -> tuple[Command, ...]:
        return tuple(self._redo)

    @property
    def max_history_size(self) -> int:
        return self._max_history_size

    @property
    def is_executing(self) -> bool:
        return self._executing

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def execute_command(self, command: Command) -> None:
        """Run *command* and push it (or merge it into the top entry)."""
        if not self._run(command, commands.execute, "execute"):
            return
        if self._undo and commands.can_merge(self._undo[-1], command):
            self._undo[-1] = commands.merge(self._undo[-1], command)
            logger.debug("Merged into previous command: %s", commands.describe(command))
        else:
            self._undo.append(command)
            if len(self._undo) > self._max_history_size:
                self._undo.pop(0)
        self._redo.clear()

    def undo(self) -> bool:
        """Undo the most recent command. Returns ``False`` when there is none."""
        if not self._undo or self._executing:
            return False
        command = self._undo[-1]
        if not self._run(command, commands.undo, "undo"):
            return False
        self._undo.pop()
        self._redo.append(command)
        return True

    def redo(self) -> bool:
        """Re-execute the most recently undone command."""
        if not self._redo or self._executing:
            return False
        command = self._redo[-1]
        if not self._run(command, commands.execute, "redo"):
            return False
        self._redo.pop()
        self._undo.append(command)
        if len(self._undo) > self._max_history_size:
            self._undo.pop(0)
        return True

    def can_undo(self) -> bool:
        return bool(self._undo) and not self._executing

    def can_redo(self) -> bool:
        return bool(self._redo) and not self._executing

    def get_undo_description(self) -> Optional[str]:
        return commands.describe(self._undo[-1]) if self._undo else None

    def get_redo_description(self) -> Optional[str]:
        return commands.describe(self._redo[-1]) if self._redo else None

    def clear_history(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def set_max_history_size(self, size: int) -> None:
        """Change the bound, evicting the oldest entries if the stack is over it."""
        self._max_history_size = max(1, int(size))
        overflow = len(self._undo) - self._max_history_size
        if overflow > 0:
            del self._undo[:overflow]

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self, command: Command, action, verb: str) -> bool:
        if self._executing:
            logger.warning(
                "Ignoring %s of %r: another command is in progress",
                verb,
                commands.describe(command),
            )
            return False
        self._executing = True
        snapshot = self._state.snapshot()
        try:
            action(command, self._state)
        except CommandExecutionError:
            self._state.restore(snapshot)
            logger.error("Failed to %s %r", verb, commands.describe(command))
            raise
        except Exception as exc:
            self._state.restore(snapshot)
            logger.error("Failed to %s %r: %s", verb, commands.describe(command), exc)
            raise CommandExecutionError(
                f"Failed to {verb} '{commands.describe(command)}': {exc}"
            ) from exc
        finally:
            self._executing = False
        logger.debug("%s: %s", verb.capitalize(), commands.describe(command))
        return True
