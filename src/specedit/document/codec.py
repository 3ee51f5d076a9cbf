"""Decode specification text into a document tree and encode it back.

The canonical document tree is the plain ``dict``/``list``/scalar structure
produced by ``json.loads`` or ``yaml.safe_load``; it carries no trace of the
original surface syntax beyond the :class:`~specedit.models.DocumentFormat`
returned alongside it.

* :func:`detect_format` -- JSON when the first non-whitespace character is
  ``{`` or ``[``, YAML otherwise.
* :func:`decode` -- Parse text into a tree, raising
  :class:`~specedit.exceptions.ParseError`.
* :func:`encode` -- Render a tree as 2-space JSON or 2-space, unwrapped YAML,
  raising :class:`~specedit.exceptions.SerializeError`.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from specedit.exceptions import ParseError, SerializeError
from specedit.models import DocumentFormat

_YAML_LINE_WIDTH = float("inf")


def detect_format(content: str) -> DocumentFormat:
    """Guess the surface syntax of *content* from its first significant character."""
    trimmed = content.lstrip()
    if trimmed.startswith(("{", "[")):
        return DocumentFormat.JSON
    return DocumentFormat.YAML


def decode(content: str) -> tuple[dict[str, Any], DocumentFormat]:
    """Parse *content* into a document tree.

    Unlike a "try JSON, then YAML" loader, the format is decided up front by
    :func:`detect_format` so that error messages refer to the syntax the
    author actually used.

    Args:
        content: Raw JSON or YAML text.

    Returns:
        A ``(document, format)`` tuple.

    Raises:
        ParseError: If the content is empty, malformed, or its root is not
            an object.
    """
    if not content.strip():
        raise ParseError("Document is empty")

    fmt = detect_format(content)
    if fmt == DocumentFormat.JSON:
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON: {exc}") from exc
    else:
        try:
            result = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ParseError(f"Invalid YAML: {exc}") from exc

    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise ParseError(f"Document must be a JSON/YAML object (got {kind})")
    return result, fmt


def encode(document: Any, fmt: DocumentFormat) -> str:
    """Render *document* as text in the given format.

    JSON uses 2-space indentation. YAML uses 2-space indentation, block
    style and no line wrapping; key order is kept as in the tree.

    Raises:
        SerializeError: If the tree contains values that cannot be rendered
            (arbitrary objects, circular references).
    """
    if fmt == DocumentFormat.JSON:
        try:
            return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            raise SerializeError(f"Cannot render document as JSON: {exc}") from exc

    try:
        return yaml.safe_dump(
            document,
            indent=2,
            width=_YAML_LINE_WIDTH,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    except yaml.YAMLError as exc:
        raise SerializeError(f"Cannot render document as YAML: {exc}") from exc
