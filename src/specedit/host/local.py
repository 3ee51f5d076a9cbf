"""Host backed by the local filesystem (and read-only HTTP URLs).

Used by the command line. Notifications go to the global
:class:`~specedit.output.OutputManager`; persisted state lives in memory
for the lifetime of the host.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from specedit import output
from specedit.config import atomic_write
from specedit.exceptions import HostError
from specedit.host.base import EditorHost

logger = logging.getLogger(__name__)


def is_url(uri: str) -> bool:
    return uri.startswith(("http://", "https://"))


class LocalHost(EditorHost):
    """Reads and writes documents on disk.

    Args:
        transport: Optional httpx transport for URL reads, e.g. an
            :class:`httpx.MockTransport` in tests.
        http_timeout: Per-request timeout for URL reads, in seconds.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_timeout: float = 30.0,
    ) -> None:
        super().__init__()
        self._transport = transport
        self._http_timeout = http_timeout
        self._state: dict[str, Any] = {}

    async def read_file(self, uri: str) -> str:
        if is_url(uri):
            return await self._read_url(uri)
        path = Path(uri)
        if not path.is_file():
            raise HostError(f"File not found: {uri}")
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise HostError(f"Cannot read {uri}: {exc}") from exc

    async def write_file(self, uri: str, content: str) -> None:
        if is_url(uri):
            raise HostError(f"Cannot write to a URL: {uri}")
        try:
            atomic_write(Path(uri), content)
        except OSError as exc:
            raise HostError(f"Cannot write {uri}: {exc}") from exc
        logger.info("Wrote %d characters to %s", len(content), uri)

    async def _read_url(self, url: str) -> str:
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self._http_timeout,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise HostError(
                    f"HTTP {exc.response.status_code} fetching {url}"
                ) from exc
            except httpx.RequestError as exc:
                raise HostError(f"Failed to fetch {url}: {exc}") from exc
        return response.text

    def show_info(self, message: str) -> None:
        output.info(message)

    def show_warning(self, message: str) -> None:
        output.warning(message)

    def show_error(self, message: str) -> None:
        output.error(message)

    def get_state(self, key: str) -> Optional[Any]:
        return self._state.get(key)

    def set_state(self, key: str, value: Any) -> None:
        self._state[key] = value
