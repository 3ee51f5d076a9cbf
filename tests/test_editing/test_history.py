"""Tests for specedit.editing.history -- bounded undo/redo with merging."""

from __future__ import annotations

import copy
import logging
from typing import Any

import pytest

from specedit.document.state import DocumentState
from specedit.editing import edits
from specedit.editing.commands import SetValue
from specedit.editing.history import CommandHistory
from specedit.exceptions import CommandExecutionError

MINIMAL = (
    '{"openapi":"3.0.0","info":{"title":"T","version":"1"},'
    '"paths":{"/a":{"get":{"operationId":"opA"}}}}'
)


@pytest.fixture
def history(petstore_state: DocumentState) -> CommandHistory:
    return CommandHistory(petstore_state)


def _doc(history: CommandHistory) -> dict[str, Any]:
    return history._state.document


class TestExecute:
    def test_pushes_and_clears_redo(self, history: CommandHistory) -> None:
        history.execute_command(edits.set_info_field(_doc(history), "title", "A"))
        history.undo()
        assert history.can_redo()
        history.execute_command(edits.set_info_field(_doc(history), "version", "2"))
        assert not history.can_redo()
        assert len(history.undo_stack) == 1

    def test_consecutive_same_path_edits_merge(self, history: CommandHistory) -> None:
        for title in ("A", "AB", "ABC"):
            history.execute_command(edits.set_info_field(_doc(history), "title", title))
        assert len(history.undo_stack) == 1
        assert history.get_undo_description() == "Update title: ABC"
        history.undo()
        assert _doc(history)["info"]["title"] == "Swagger Petstore"

    def test_interleaved_edits_do_not_merge(self, history: CommandHistory) -> None:
        history.execute_command(edits.set_info_field(_doc(history), "title", "A"))
        history.execute_command(edits.set_info_field(_doc(history), "version", "2"))
        history.execute_command(edits.set_info_field(_doc(history), "title", "B"))
        assert len(history.undo_stack) == 3

    def test_bound_evicts_oldest(self, petstore_state: DocumentState) -> None:
        history = CommandHistory(petstore_state, max_history_size=3)
        for i in range(5):
            history.execute_command(
                edits.set_value(petstore_state.document, ("info", f"x-{i}"), i)
            )
        assert [c.path[-1] for c in history.undo_stack] == ["x-2", "x-3", "x-4"]

    def test_failure_leaves_stacks_unchanged(self, history: CommandHistory) -> None:
        history.execute_command(edits.set_info_field(_doc(history), "title", "A"))
        history.undo()
        undo_before, redo_before = history.undo_stack, history.redo_stack
        document_before = copy.deepcopy(_doc(history))

        bad = SetValue(("info", "title", "deeper"), "x", "y", "bad edit")
        with pytest.raises(CommandExecutionError):
            history.execute_command(bad)

        assert history.undo_stack == undo_before
        assert history.redo_stack == redo_before
        assert _doc(history) == document_before
        assert not history.is_executing

    def test_listener_failure_rolls_back_document(self, make_state) -> None:
        state = make_state(MINIMAL)
        document = state.document
        history = CommandHistory(state)

        def _explode(s: DocumentState) -> None:
            raise RuntimeError("listener broke")

        state.subscribe(_explode)
        with pytest.raises(CommandExecutionError, match="listener broke"):
            history.execute_command(edits.set_info_field(document, "title", "X"))

        assert state.document is document
        assert document["info"]["title"] == "T"
        assert not state.is_dirty
        assert history.undo_stack == ()
        assert not history.is_executing

    def test_unexpected_errors_are_wrapped(self, history: CommandHistory) -> None:
        # An unhashable segment makes the mapping lookup raise TypeError.
        command = SetValue(("info", ["x"]), "a", "b", "mystery")  # type: ignore[arg-type]
        with pytest.raises(CommandExecutionError, match="Failed to execute 'mystery'"):
            history.execute_command(command)
        assert not history.can_undo()

    def test_nested_execute_is_ignored(
        self, history: CommandHistory, caplog: pytest.LogCaptureFixture
    ) -> None:
        state = history._state
        nested: list[int] = []

        def _listener(s: DocumentState) -> None:
            if not nested:
                nested.append(1)
                history.execute_command(edits.set_info_field(s.document, "version", "9"))

        state.subscribe(_listener)
        with caplog.at_level(logging.WARNING, logger="specedit.editing.history"):
            history.execute_command(edits.set_info_field(_doc(history), "title", "A"))

        assert len(history.undo_stack) == 1
        assert _doc(history)["info"]["version"] == "1.0.0"
        assert "another command is in progress" in caplog.text


class TestUndoRedo:
    def test_empty_history(self, history: CommandHistory) -> None:
        assert history.undo() is False
        assert history.redo() is False
        assert history.get_undo_description() is None
        assert history.get_redo_description() is None

    def test_undo_then_redo_restores_state(self, history: CommandHistory) -> None:
        original = copy.deepcopy(_doc(history))
        history.execute_command(edits.add_path(_doc(history), "/owners"))
        history.execute_command(edits.rename_tag(_doc(history), 0, "animals"))
        edited = copy.deepcopy(_doc(history))

        assert history.undo() and history.undo()
        assert _doc(history) == original
        assert history.get_redo_description() == "Add path: /owners"

        assert history.redo() and history.redo()
        assert _doc(history) == edited
        assert not history.can_redo()

    def test_redo_after_eviction(self, petstore_state: DocumentState) -> None:
        history = CommandHistory(petstore_state, max_history_size=2)
        for i in range(3):
            history.execute_command(edits.set_value(petstore_state.document, ("info", f"x-{i}"), i))
        assert history.undo() and history.undo()
        assert not history.undo()
        assert petstore_state.document["info"]["x-0"] == 0
        assert history.redo() and history.redo()
        assert len(history.undo_stack) == 2
        assert petstore_state.document["info"]["x-2"] == 2

    def test_unavailable_while_a_command_runs(self, history: CommandHistory) -> None:
        history.execute_command(edits.set_info_field(_doc(history), "title", "A"))
        history.execute_command(edits.set_info_field(_doc(history), "version", "2"))
        history.undo()
        assert history.can_undo() and history.can_redo()

        seen: list[tuple[bool, bool, bool]] = []
        history._state.subscribe(
            lambda s: seen.append((history.is_executing, history.can_undo(), history.can_redo()))
        )
        history.redo()

        assert seen == [(True, False, False)]
        assert history.can_undo()

    def test_failed_undo_keeps_entry(self, history: CommandHistory) -> None:
        history.execute_command(edits.remove_tag(_doc(history), 0))
        # Break the tree out from under the command.
        _doc(history)["tags"] = "not a list"
        with pytest.raises(CommandExecutionError):
            history.undo()
        assert history.can_undo()
        assert not history.can_redo()


class TestConfiguration:
    def test_clear_history(self, history: CommandHistory) -> None:
        history.execute_command(edits.set_info_field(_doc(history), "title", "A"))
        history.undo()
        history.clear_history()
        assert not history.can_undo()
        assert not history.can_redo()

    def test_shrinking_bound_trims_oldest(self, petstore_state: DocumentState) -> None:
        history = CommandHistory(petstore_state)
        for i in range(4):
            history.execute_command(edits.set_value(petstore_state.document, ("info", f"x-{i}"), i))
        history.set_max_history_size(2)
        assert history.max_history_size == 2
        assert [c.path[-1] for c in history.undo_stack] == ["x-2", "x-3"]

    def test_bound_is_at_least_one(self, history: CommandHistory) -> None:
        history.set_max_history_size(0)
        assert history.max_history_size == 1


class TestEndToEnd:
    def test_title_edit_then_undo(self, make_state) -> None:
        state = make_state(MINIMAL)
        history = CommandHistory(state)
        history.execute_command(edits.set_value(state.document, "/info/title", "T2"))
        assert state.document["info"]["title"] == "T2"
        history.undo()
        assert state.document["info"]["title"] == "T"
