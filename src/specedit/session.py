"""The editor session: one document, its history, selection and problems.

:class:`EditorSession` wires the document service, the state container,
the command history, the selection store, the validation store and a host
together. Every change of the document rebuilds the navigation tree on the
next access and re-runs the minimal validation.

Typical use::

    session = EditorSession(LocalHost())
    await session.open("petstore.yaml")
    session.execute(edits.set_info_field(session.document, "title", "Pets"))
    session.undo()
    await session.save()
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specedit.document.service import DocumentService, parse_document, serialize_document
from specedit.document.state import DocumentState
from specedit.editing.commands import Command
from specedit.editing.history import CommandHistory
from specedit.exceptions import InvalidUsageError, SerializeError, SpeceditError
from specedit.host.base import EditorHost, read_with_timeout
from specedit.models import (
    EnvironmentMessage,
    GlobalConfig,
    MessageType,
    Selection,
    TreeNode,
    ValidationProblem,
)
from specedit.navigation.tree import build_navigation_tree, find_node, selection_for_node
from specedit.selection.store import SelectionStore
from specedit.validation.store import ValidationStore, problems_from_validation

logger = logging.getLogger(__name__)


class EditorSession:
    """Composition root for one editing session.

    Args:
        host: Where documents are read from and written to.
        config: Effective configuration; defaults apply when omitted.
    """

    def __init__(self, host: EditorHost, config: Optional[GlobalConfig] = None) -> None:
        config = config or GlobalConfig()
        self.host = host
        self.service = DocumentService()
        self.state = DocumentState()
        self.history = CommandHistory(self.state, config.history.max_size)
        self.selection = SelectionStore(config.selection.max_history)
        self.validation = ValidationStore()
        self._read_timeout = config.host.read_timeout
        self._tree: Optional[list[TreeNode]] = None
        self._disposers = [
            self.state.subscribe(self._on_state_change),
            self.host.on_message(self.handle_message),
        ]

    @property
    def document(self) -> Optional[dict[str, Any]]:
        return self.state.document

    @property
    def tree(self) -> list[TreeNode]:
        """Navigation outline of the current document, rebuilt after each change."""
        if self._tree is None:
            self._tree = build_navigation_tree(self.state.document, self.state.dialect)
        return self._tree

    # ------------------------------------------------------------------
    # Loading and saving
    # ------------------------------------------------------------------

    async def open(self, uri: str) -> None:
        """Read *uri* through the host and load it.

        Raises:
            HostError: If the read fails or times out.
            ParseError: If the content is not a supported document.
        """
        self.state.set_loading(True)
        try:
            content = await read_with_timeout(self.host, uri, self._read_timeout)
        except SpeceditError as exc:
            self.state.set_error(str(exc))
            logger.error("Failed to read %s: %s", uri, exc)
            raise
        self.load_content(uri, content)

    def load_content(self, uri: str, content: str) -> None:
        """Parse *content* and install it as the current document.

        Clears the undo/redo history and the current selection. A parse
        failure is shown as a host error; structural validation findings
        on the loaded document are shown as a single host warning.
        """
        try:
            document, fmt, dialect = parse_document(content)
        except SpeceditError as exc:
            self.state.set_error(str(exc))
            self.host.show_error(f"Failed to parse document: {exc}")
            raise
        self.history.clear_history()
        self.selection.clear_selection()
        self.state.set_document(
            document,
            fmt,
            uri,
            self.service.get_document_type_name(document),
            dialect,
        )
        logger.info("Loaded %s (%s, %s)", uri, self.state.type_name, fmt.value)
        problems = self.validation.problems
        if problems:
            self.host.show_warning(
                "Document validation warnings: " + ", ".join(p.message for p in problems)
            )

    async def save(self) -> None:
        """Serialize the document and write it back through the host.

        The dirty flag is cleared only after the host write succeeds.

        Raises:
            InvalidUsageError: If no document is loaded.
            SerializeError: If the document cannot be rendered; the dirty
                flag is left as it was.
        """
        document, fmt, uri = self.state.document, self.state.format, self.state.uri
        if document is None or fmt is None or uri is None:
            raise InvalidUsageError("No document is loaded")
        try:
            content = serialize_document(document, fmt)
        except SerializeError as exc:
            self.host.show_error(f"Failed to save: {exc}")
            raise
        await self.host.write_file(uri, content)
        self.state.mark_saved()
        logger.info("Saved %s", uri)

    def close(self) -> None:
        """Drop the document and detach from the host."""
        for dispose in self._disposers:
            dispose()
        self._disposers = []
        self.history.clear_history()
        self.selection.clear_selection()
        self.validation.clear_problems()
        self.state.clear()
        self._tree = None

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def execute(self, command: Command) -> None:
        self.history.execute_command(command)

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, selection: Selection) -> None:
        self.selection.select(selection)

    def select_node(self, node_id: str) -> Selection:
        """Select the outline node with id *node_id*.

        Raises:
            InvalidUsageError: If no such node exists in the current tree.
        """
        node = find_node(self.tree, node_id)
        if node is None:
            raise InvalidUsageError(f"No navigation node with id '{node_id}'")
        selection = selection_for_node(node)
        self.selection.select(selection)
        return selection

    def select_problem(self, problem: ValidationProblem) -> Selection:
        selection = self.validation.selection_for_problem(problem)
        self.selection.select(selection)
        return selection

    # ------------------------------------------------------------------
    # Host messages
    # ------------------------------------------------------------------

    async def handle_message(self, message: EnvironmentMessage) -> None:
        """React to a host message.

        ``init`` loads ``payload["content"]`` (or reads ``payload["uri"]``
        when no content is given); ``reload`` re-reads the current URI.
        """
        payload = message.payload or {}
        if message.type is MessageType.INIT:
            uri = payload.get("uri") or self.state.uri
            if not uri:
                raise InvalidUsageError("init message requires a 'uri'")
            if payload.get("content") is not None:
                self.load_content(uri, payload["content"])
            else:
                await self.open(uri)
        elif message.type is MessageType.UNDO:
            self.undo()
        elif message.type is MessageType.REDO:
            self.redo()
        elif message.type is MessageType.SAVE:
            await self.save()
        elif message.type is MessageType.RELOAD:
            if self.state.uri is None:
                raise InvalidUsageError("Nothing to reload: no document is loaded")
            await self.open(self.state.uri)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def revalidate(self) -> None:
        """Replace all problems with a fresh minimal validation run."""
        self.validation.set_validating(True)
        try:
            self.validation.clear_problems()
            if self.state.document is not None:
                result = self.service.validate(self.state.document)
                self.validation.add_problems(problems_from_validation(result))
        finally:
            self.validation.set_validating(False)

    def _on_state_change(self, state: DocumentState) -> None:
        self._tree = None
        self.revalidate()
