"""Tests for specedit.host.local -- filesystem and URL-backed host."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

import httpx
import pytest

from specedit.exceptions import HostError, HostTimeoutError
from specedit.host.base import read_with_timeout
from specedit.host.local import LocalHost, is_url
from specedit.output import OutputFormat, OutputManager, set_output


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/openapi.yaml":
        return httpx.Response(200, text="openapi: 3.0.0\n")
    if request.url.path == "/moved":
        return httpx.Response(302, headers={"Location": "/openapi.yaml"})
    return httpx.Response(404, text="not here")


@pytest.fixture
def host() -> LocalHost:
    return LocalHost(transport=httpx.MockTransport(_handler))


class TestFiles:
    def test_read(self, host: LocalHost, tmp_path: Path) -> None:
        path = tmp_path / "spec.yaml"
        path.write_text("openapi: 3.0.0\n", encoding="utf-8")
        assert asyncio.run(host.read_file(str(path))) == "openapi: 3.0.0\n"

    def test_read_missing(self, host: LocalHost, tmp_path: Path) -> None:
        missing = tmp_path / "missing.json"
        with pytest.raises(HostError, match="File not found"):
            asyncio.run(host.read_file(str(missing)))

    def test_slow_read_times_out(
        self, host: LocalHost, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "spec.yaml"
        path.write_text("openapi: 3.0.0\n", encoding="utf-8")
        original = Path.read_text

        def _slow_read(self: Path, *args, **kwargs) -> str:
            time.sleep(0.5)
            return original(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", _slow_read)
        with pytest.raises(HostTimeoutError, match="Timeout reading file"):
            asyncio.run(read_with_timeout(host, str(path), timeout=0.05))

    def test_write_is_atomic_and_creates_parents(self, host: LocalHost, tmp_path: Path) -> None:
        target = tmp_path / "out" / "spec.json"
        asyncio.run(host.write_file(str(target), '{"openapi": "3.0.0"}\n'))
        assert target.read_text(encoding="utf-8") == '{"openapi": "3.0.0"}\n'
        assert [p.name for p in target.parent.iterdir()] == ["spec.json"]

    def test_write_keeps_newlines(self, host: LocalHost, tmp_path: Path) -> None:
        target = tmp_path / "spec.yaml"
        asyncio.run(host.write_file(str(target), "a: 1\nb: 2\n"))
        assert target.read_bytes() == b"a: 1\nb: 2\n"


class TestUrls:
    def test_is_url(self) -> None:
        assert is_url("https://example.com/openapi.yaml")
        assert is_url("http://localhost/spec")
        assert not is_url("/tmp/spec.yaml")

    def test_read_url(self, host: LocalHost) -> None:
        text = asyncio.run(host.read_file("https://api.example.com/openapi.yaml"))
        assert text == "openapi: 3.0.0\n"

    def test_follows_redirects(self, host: LocalHost) -> None:
        text = asyncio.run(host.read_file("https://api.example.com/moved"))
        assert text == "openapi: 3.0.0\n"

    def test_http_error(self, host: LocalHost) -> None:
        with pytest.raises(HostError, match="HTTP 404"):
            asyncio.run(host.read_file("https://api.example.com/nope"))

    def test_connection_error(self) -> None:
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        host = LocalHost(transport=httpx.MockTransport(_refuse))
        with pytest.raises(HostError, match="Failed to fetch"):
            asyncio.run(host.read_file("https://api.example.com/openapi.yaml"))

    def test_cannot_write_url(self, host: LocalHost) -> None:
        with pytest.raises(HostError, match="Cannot write to a URL"):
            asyncio.run(host.write_file("https://api.example.com/openapi.yaml", "x"))


class TestNotificationsAndState:
    def test_notifications_go_to_output(self, host: LocalHost, capsys: pytest.CaptureFixture) -> None:
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        host.show_warning("careful")
        host.show_error("broken")
        err = capsys.readouterr().err
        assert "Warning: careful" in err
        assert "Error: broken" in err

    def test_state(self, host: LocalHost) -> None:
        assert host.get_state("selection") is None
        host.set_state("selection", {"type": "info"})
        assert host.get_state("selection") == {"type": "info"}
