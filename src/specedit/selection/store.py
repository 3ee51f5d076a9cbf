"""Current selection with bounded back/forward history."""

from __future__ import annotations

import logging

from specedit.models import Selection

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 50


class SelectionStore:
    """Tracks what the user is looking at and lets them step back and forward.

    History starts with a single ``none`` selection. Selecting the same
    location again (same ``type`` and ``path``) is ignored. Selecting a new
    location drops any forward entries, appends, and evicts the oldest
    entry once ``max_history`` is exceeded.
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY) -> None:
        self._max_history = max(1, int(max_history))
        self.current: Selection = Selection()
        self._history: list[Selection] = [self.current]
        self._index = 0

    @property
    def history(self) -> tuple[Selection, ...]:
        return tuple(self._history)

    @property
    def history_index(self) -> int:
        return self._index

    def select(self, selection: Selection) -> None:
        if self.current.same_location(selection):
            return
        del self._history[self._index + 1 :]
        self._history.append(selection)
        if len(self._history) > self._max_history:
            self._history.pop(0)
        self._index = len(self._history) - 1
        self.current = selection
        logger.debug("Selected %s %s", selection.type.value, selection.path or "")

    def clear_selection(self) -> None:
        """Reset the current selection to ``none``; history is left as is."""
        self.current = Selection()

    def go_back(self) -> None:
        if self.can_go_back():
            self._index -= 1
            self.current = self._history[self._index]

    def go_forward(self) -> None:
        if self.can_go_forward():
            self._index += 1
            self.current = self._history[self._index]

    def can_go_back(self) -> bool:
        return self._index > 0

    def can_go_forward(self) -> bool:
        return self._index < len(self._history) - 1
