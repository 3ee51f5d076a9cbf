"""Shared test fixtures for specedit.

Provides reusable fixtures for loading specification fixtures, building
loaded state containers and sessions, creating isolated config
environments, managing output state, and running CLI commands. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Any, Optional

import pytest

from specedit.document.service import parse_document
from specedit.document.state import DocumentState
from specedit.exceptions import HostError
from specedit.host.base import EditorHost
from specedit.output import OutputFormat, OutputManager, reset_output, set_output
from specedit.session import EditorSession


FIXTURES_DIR = Path(__file__).parent / "fixtures"

MINIMAL_OPENAPI = (
    '{"openapi":"3.0.0","info":{"title":"T","version":"1"},'
    '"paths":{"/a":{"get":{"operationId":"opA"}}}}'
)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fixture documents
# ---------------------------------------------------------------------------


def read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def petstore_30_text() -> str:
    return read_fixture("petstore_3.0.json")


@pytest.fixture
def petstore_20_text() -> str:
    return read_fixture("petstore_2.0.yaml")


@pytest.fixture
def petstore_31_text() -> str:
    return read_fixture("petstore_3.1.yaml")


@pytest.fixture
def asyncapi_text() -> str:
    return read_fixture("streetlights_asyncapi.yaml")


@pytest.fixture
def petstore_30(petstore_30_text: str) -> dict[str, Any]:
    """Parsed petstore 3.0 document tree."""
    return parse_document(petstore_30_text)[0]


@pytest.fixture
def petstore_20(petstore_20_text: str) -> dict[str, Any]:
    return parse_document(petstore_20_text)[0]


@pytest.fixture
def asyncapi_doc(asyncapi_text: str) -> dict[str, Any]:
    return parse_document(asyncapi_text)[0]


@pytest.fixture
def fixture_file(tmp_path: Path):
    """Copy a fixture into tmp_path and return its path (as a factory)."""

    def _copy(name: str) -> Path:
        target = tmp_path / name
        shutil.copyfile(FIXTURES_DIR / name, target)
        return target

    return _copy


# ---------------------------------------------------------------------------
# State and session fixtures
# ---------------------------------------------------------------------------


def load_state(text: str, uri: str = "memory://doc") -> DocumentState:
    """A DocumentState with *text* parsed and installed."""
    document, fmt, dialect = parse_document(text)
    state = DocumentState()
    state.set_document(document, fmt, uri, "test", dialect)
    return state


@pytest.fixture
def make_state():
    """Factory: ``make_state(text, uri)`` returns a loaded DocumentState."""
    return load_state


@pytest.fixture
def petstore_state(petstore_30_text: str) -> DocumentState:
    return load_state(petstore_30_text, "petstore.json")


class MemoryHost(EditorHost):
    """In-memory host used to drive sessions without touching the filesystem.

    ``files`` maps URIs to contents; ``notifications`` records every
    ``show_*`` call as ``(level, message)``. A read of a URI listed in
    ``slow`` sleeps for ``delay`` seconds first.
    """

    def __init__(self, files: Optional[dict[str, str]] = None) -> None:
        super().__init__()
        self.files: dict[str, str] = dict(files or {})
        self.writes: list[tuple[str, str]] = []
        self.notifications: list[tuple[str, str]] = []
        self.slow: set[str] = set()
        self.delay = 1.0
        self._state: dict[str, Any] = {}

    async def read_file(self, uri: str) -> str:
        if uri in self.slow:
            await asyncio.sleep(self.delay)
        if uri not in self.files:
            raise HostError(f"File not found: {uri}")
        return self.files[uri]

    async def write_file(self, uri: str, content: str) -> None:
        self.files[uri] = content
        self.writes.append((uri, content))

    def show_info(self, message: str) -> None:
        self.notifications.append(("info", message))

    def show_warning(self, message: str) -> None:
        self.notifications.append(("warning", message))

    def show_error(self, message: str) -> None:
        self.notifications.append(("error", message))

    def get_state(self, key: str) -> Optional[Any]:
        return self._state.get(key)

    def set_state(self, key: str, value: Any) -> None:
        self._state[key] = value


@pytest.fixture
def make_host():
    """Factory for :class:`MemoryHost` instances."""
    return MemoryHost


@pytest.fixture
def memory_host(petstore_30_text: str, asyncapi_text: str) -> MemoryHost:
    return MemoryHost(
        {
            "petstore.json": petstore_30_text,
            "streetlights.yaml": asyncapi_text,
            "minimal.json": MINIMAL_OPENAPI,
        }
    )


@pytest.fixture
def session(memory_host: MemoryHost) -> EditorSession:
    """A session with petstore.json already open."""
    editor = EditorSession(memory_host)
    asyncio.run(editor.open("petstore.json"))
    return editor


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, clears the SPECEDIT_*
    environment variables and changes the working directory to tmp_path.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("specedit.config._is_xdg_platform", lambda: True)

    for var in ["SPECEDIT_MAX_HISTORY", "SPECEDIT_READ_TIMEOUT"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
