"""The host collaborator: where documents come from and where they go.

The editing core never touches files, sockets or UI toolkits directly. An
:class:`EditorHost` reads and writes document text, shows notifications,
keeps small pieces of persisted state and delivers
:class:`~specedit.models.EnvironmentMessage` objects (``init``, ``save``,
``undo``, ``redo``, ``reload``) to the editor.
"""

from __future__ import annotations

import abc
import asyncio
import inspect
import logging
from collections.abc import Awaitable
from typing import Any, Callable, Optional

from specedit.exceptions import HostTimeoutError
from specedit.models import EnvironmentMessage

logger = logging.getLogger(__name__)

DEFAULT_READ_TIMEOUT = 10.0

MessageHandler = Callable[[EnvironmentMessage], Optional[Awaitable[None]]]


class EditorHost(abc.ABC):
    """Abstract host environment.

    Subclasses implement file access and notifications. Message handler
    registration and :meth:`dispatch` are shared.
    """

    def __init__(self) -> None:
        self._handlers: list[MessageHandler] = []

    @abc.abstractmethod
    async def read_file(self, uri: str) -> str:
        """Return the text content stored at *uri*."""

    @abc.abstractmethod
    async def write_file(self, uri: str, content: str) -> None:
        """Store *content* at *uri*."""

    @abc.abstractmethod
    def show_info(self, message: str) -> None: ...

    @abc.abstractmethod
    def show_warning(self, message: str) -> None: ...

    @abc.abstractmethod
    def show_error(self, message: str) -> None: ...

    @abc.abstractmethod
    def get_state(self, key: str) -> Optional[Any]: ...

    @abc.abstractmethod
    def set_state(self, key: str, value: Any) -> None: ...

    def on_message(self, handler: MessageHandler) -> Callable[[], None]:
        """Register *handler* for host messages; returns a dispose function."""
        self._handlers.append(handler)

        def _dispose() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _dispose

    async def dispatch(self, message: EnvironmentMessage) -> None:
        """Deliver *message* to every registered handler in registration order.

        Handlers may be plain functions or coroutine functions; each one is
        awaited before the next is called.
        """
        logger.debug("Dispatching %s message to %d handler(s)", message.type.value, len(self._handlers))
        for handler in list(self._handlers):
            result = handler(message)
            if inspect.isawaitable(result):
                await result


async def read_with_timeout(
    host: EditorHost, uri: str, timeout: float = DEFAULT_READ_TIMEOUT
) -> str:
    """Read *uri* through *host*, failing after *timeout* seconds.

    There is no retry; the caller decides what to do with the failure.

    Raises:
        HostTimeoutError: If the read did not complete in time.
    """
    try:
        return await asyncio.wait_for(host.read_file(uri), timeout=timeout)
    except asyncio.TimeoutError:
        raise HostTimeoutError(f"Timeout reading file: {uri}") from None
