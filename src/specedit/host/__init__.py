"""Host environments the editor reads from, writes to and takes messages from."""

from specedit.host.base import EditorHost, read_with_timeout
from specedit.host.local import LocalHost

__all__ = ["EditorHost", "LocalHost", "read_with_timeout"]
