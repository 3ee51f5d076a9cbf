"""Tests for specedit.document.state -- the document state container."""

from __future__ import annotations

from specedit.document.state import DocumentState
from specedit.models import Dialect, DocumentFormat


def _doc() -> dict:
    return {"openapi": "3.0.0", "info": {"title": "T", "version": "1"}, "paths": {}}


class TestSetDocument:
    def test_installs_metadata(self) -> None:
        state = DocumentState()
        document = _doc()
        state.set_document(document, DocumentFormat.JSON, "a.json", "OpenAPI 3.0")
        assert state.document is document
        assert state.format == DocumentFormat.JSON
        assert state.uri == "a.json"
        assert state.type_name == "OpenAPI 3.0"
        assert state.dialect is Dialect.OPENAPI_3_0
        assert state.is_dirty is False

    def test_clears_loading_and_error(self) -> None:
        state = DocumentState()
        state.set_loading(True)
        state.set_error("boom")
        state.set_loading(True)
        state.set_document(_doc(), DocumentFormat.JSON, "a.json", "OpenAPI 3.0")
        assert state.is_loading is False
        assert state.error is None


class TestUpdateDocument:
    def test_marks_dirty_without_copying(self) -> None:
        state = DocumentState()
        state.set_document(_doc(), DocumentFormat.JSON, "a.json", "OpenAPI 3.0")
        document = state.document
        document["info"]["title"] = "T2"
        state.update_document(document)
        assert state.document is document
        assert state.is_dirty is True

    def test_rederives_dialect(self) -> None:
        state = DocumentState()
        state.set_document(_doc(), DocumentFormat.JSON, "a.json", "OpenAPI 3.0")
        state.update_document({"asyncapi": "2.6.0", "info": {}})
        assert state.dialect is Dialect.ASYNCAPI_2

    def test_mark_saved(self) -> None:
        state = DocumentState()
        state.set_document(_doc(), DocumentFormat.JSON, "a.json", "OpenAPI 3.0")
        state.update_document(state.document)
        state.mark_saved()
        assert state.is_dirty is False


class TestSnapshot:
    def test_restore_refills_original_document(self) -> None:
        state = DocumentState()
        state.set_document(_doc(), DocumentFormat.JSON, "a.json", "OpenAPI 3.0")
        document = state.document
        snapshot = state.snapshot()

        document["info"]["title"] = "changed"
        state.update_document({"asyncapi": "2.6.0", "info": {}})
        state.restore(snapshot)

        assert state.document is document
        assert document["info"]["title"] == "T"
        assert state.dialect is Dialect.OPENAPI_3_0
        assert state.is_dirty is False

    def test_restore_does_not_notify(self) -> None:
        state = DocumentState()
        state.set_document(_doc(), DocumentFormat.JSON, "a.json", "OpenAPI 3.0")
        snapshot = state.snapshot()
        calls: list[DocumentState] = []
        state.subscribe(calls.append)
        state.restore(snapshot)
        assert calls == []


class TestListeners:
    def test_notified_on_each_change(self) -> None:
        state = DocumentState()
        seen: list[bool] = []
        state.subscribe(lambda s: seen.append(s.is_dirty))
        state.set_document(_doc(), DocumentFormat.JSON, "a.json", "OpenAPI 3.0")
        state.update_document(state.document)
        state.clear()
        assert seen == [False, True, False]

    def test_dispose_unsubscribes(self) -> None:
        state = DocumentState()
        calls: list[DocumentState] = []
        dispose = state.subscribe(calls.append)
        dispose()
        dispose()
        state.set_document(_doc(), DocumentFormat.JSON, "a.json", "OpenAPI 3.0")
        assert calls == []

    def test_clear_resets_everything(self) -> None:
        state = DocumentState()
        state.set_document(_doc(), DocumentFormat.YAML, "a.yaml", "OpenAPI 3.0")
        state.update_document(state.document)
        state.clear()
        assert state.document is None
        assert state.uri is None
        assert state.dialect is None
        assert state.is_dirty is False
