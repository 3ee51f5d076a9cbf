"""Dialect detection and pure dialect queries over a document tree.

:func:`detect_dialect` is the one place that probes the raw discriminator
fields (``swagger``, ``openapi``, ``asyncapi``). Consumers receive the
resulting :class:`~specedit.models.Dialect` and branch on it instead of
re-probing the tree themselves.

Nothing here caches on the document: every query is recomputed from the
tree it is given.
"""

from __future__ import annotations

from typing import Any, Optional

from specedit.exceptions import ParseError
from specedit.models import Dialect


def _version_string(value: Any) -> str:
    # YAML turns an unquoted ``swagger: 2.0`` into a float.
    return str(value).strip()


def detect_dialect(document: Any) -> Dialect:
    """Return the dialect declared by *document*.

    Probe order is ``swagger``, ``openapi``, ``asyncapi``; the first present
    key decides.

    Raises:
        ParseError: If no discriminator is present or the declared version
            is not supported. There is no speculative inference from other
            fields.
    """
    if not isinstance(document, dict):
        raise ParseError("Document must be an object to detect its dialect")

    if document.get("swagger") is not None:
        version = _version_string(document["swagger"])
        if version in ("2.0", "2"):
            return Dialect.OPENAPI_2
        raise ParseError(f"Unsupported Swagger version: {version}")

    if document.get("openapi") is not None:
        version = _version_string(document["openapi"])
        if version.startswith("3.0"):
            return Dialect.OPENAPI_3_0
        if version.startswith("3."):
            # 3.1 and any later 3.x minor share the 3.1 document shape.
            return Dialect.OPENAPI_3_1
        raise ParseError(f"Unsupported OpenAPI version: {version}")

    if document.get("asyncapi") is not None:
        version = _version_string(document["asyncapi"])
        if version.startswith("2."):
            return Dialect.ASYNCAPI_2
        raise ParseError(f"Unsupported AsyncAPI version: {version}")

    raise ParseError(
        "Unrecognized document: expected a 'swagger', 'openapi' or 'asyncapi' field"
    )


def try_detect_dialect(document: Any) -> Optional[Dialect]:
    """Like :func:`detect_dialect` but returns ``None`` instead of raising."""
    try:
        return detect_dialect(document)
    except ParseError:
        return None


def document_version(document: Any) -> Optional[str]:
    """Return the raw discriminator version string, or ``None``."""
    if not isinstance(document, dict):
        return None
    for key in ("swagger", "openapi", "asyncapi"):
        if document.get(key) is not None:
            return _version_string(document[key])
    return None


def document_type_name(document: Any) -> str:
    """Human-readable document type, e.g. ``"OpenAPI 3.0"`` or ``"AsyncAPI 2.6.0"``."""
    dialect = try_detect_dialect(document)
    if dialect is None:
        return "Unknown"
    version = document_version(document) or ""
    if dialect is Dialect.OPENAPI_2:
        return "OpenAPI 2.0 (Swagger)"
    if dialect is Dialect.OPENAPI_3_0:
        return "OpenAPI 3.0"
    if dialect is Dialect.OPENAPI_3_1:
        if version.startswith("3.1"):
            return "OpenAPI 3.1"
        return f"OpenAPI {version}"
    return f"AsyncAPI {version}"


def is_openapi(document: Any) -> bool:
    dialect = try_detect_dialect(document)
    return dialect is not None and dialect.is_openapi


def is_asyncapi(document: Any) -> bool:
    dialect = try_detect_dialect(document)
    return dialect is not None and dialect.is_asyncapi
