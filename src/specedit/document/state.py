"""The document state container.

:class:`DocumentState` is the single owner of "the current document" and its
metadata (format, URI, type name, dialect, dirty flag). It is a notifier,
not a mutation authority: :meth:`DocumentState.update_document` only swaps
the reference and marks the state dirty. Commands mutate the tree in place
(or build a new one) before calling it. The only copy taken here is the
rollback snapshot the command history uses when a command fails.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Optional

from specedit.document.dialect import try_detect_dialect
from specedit.models import Dialect, DocumentFormat

StateListener = Callable[["DocumentState"], None]
StateSnapshot = tuple[
    Optional[dict[str, Any]], Optional[dict[str, Any]], Optional[Dialect], bool
]


class DocumentState:
    """Holds the live document and notifies listeners when it changes.

    Instances are created by the composition root
    (:class:`~specedit.session.EditorSession`) and passed by reference to
    the command history and any reader; there is no module-level instance.
    """

    def __init__(self) -> None:
        self.document: Optional[dict[str, Any]] = None
        self.format: Optional[DocumentFormat] = None
        self.uri: Optional[str] = None
        self.type_name: Optional[str] = None
        self.dialect: Optional[Dialect] = None
        self.is_loading: bool = False
        self.error: Optional[str] = None
        self.is_dirty: bool = False
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_document(
        self,
        document: dict[str, Any],
        format: DocumentFormat,
        uri: str,
        type_name: str,
        dialect: Optional[Dialect] = None,
    ) -> None:
        """Install a freshly loaded document. Clears the dirty flag and any error."""
        self.document = document
        self.format = format
        self.uri = uri
        self.type_name = type_name
        self.dialect = dialect if dialect is not None else try_detect_dialect(document)
        self.is_loading = False
        self.error = None
        self.is_dirty = False
        self._notify()

    def update_document(self, document: dict[str, Any]) -> None:
        """Replace the document reference and mark the state dirty.

        The caller has already mutated *document* in place or produced a
        new tree. The dialect is re-derived because a whole-document
        replacement may change it.
        """
        self.document = document
        self.dialect = try_detect_dialect(document)
        self.is_dirty = True
        self._notify()

    def set_loading(self, is_loading: bool) -> None:
        self.is_loading = is_loading
        if is_loading:
            self.error = None

    def set_error(self, error: Optional[str]) -> None:
        self.error = error
        self.is_loading = False

    def mark_saved(self) -> None:
        self.is_dirty = False

    def snapshot(self) -> StateSnapshot:
        """Capture the document (reference and deep copy), dialect and dirty flag."""
        return self.document, copy.deepcopy(self.document), self.dialect, self.is_dirty

    def restore(self, snapshot: StateSnapshot) -> None:
        """Put back a :meth:`snapshot` without notifying listeners.

        The original document object is refilled in place, so references
        taken before the snapshot see the restored content.
        """
        document, saved, self.dialect, self.is_dirty = snapshot
        if document is not None and saved is not None:
            document.clear()
            document.update(saved)
        self.document = document

    def clear(self) -> None:
        """Forget the current document and all metadata."""
        self.document = None
        self.format = None
        self.uri = None
        self.type_name = None
        self.dialect = None
        self.is_loading = False
        self.error = None
        self.is_dirty = False
        self._notify()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener* and return a function that unregisters it."""
        self._listeners.append(listener)

        def _dispose() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _dispose

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
