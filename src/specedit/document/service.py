"""Document service -- parse, serialise and minimally validate specifications.

:class:`DocumentService` is the record-returning facade used by the editor
session: failures come back as ``success=False`` results instead of
exceptions, so callers decide how to surface them. The raising primitives
live in :mod:`specedit.document.codec` and :mod:`specedit.document.dialect`
and are re-exported here as :func:`parse_document`.

Validation is deliberately shallow: required ``info`` fields plus a
``paths``/``webhooks`` (OpenAPI) or channel (AsyncAPI) presence check. Full
JSON-Schema validation is not attempted.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specedit.document.codec import decode, encode
from specedit.document.dialect import (
    detect_dialect,
    document_type_name,
    document_version,
    is_asyncapi,
    is_openapi,
    try_detect_dialect,
)
from specedit.exceptions import ParseError, SerializeError
from specedit.models import (
    Dialect,
    DocumentFormat,
    ParseResult,
    SerializeResult,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def parse_document(content: str) -> tuple[dict[str, Any], DocumentFormat, Dialect]:
    """Decode *content* and detect its dialect.

    Raises:
        ParseError: On malformed text or a missing/unsupported discriminator.
    """
    document, fmt = decode(content)
    dialect = detect_dialect(document)
    return document, fmt, dialect


def serialize_document(document: Any, fmt: DocumentFormat) -> str:
    """Render *document* as text.

    Raises:
        SerializeError: If the tree no longer declares a known dialect or
            contains values that cannot be rendered.
    """
    if try_detect_dialect(document) is None:
        raise SerializeError(
            "Document no longer declares a supported 'swagger', 'openapi' or 'asyncapi' version"
        )
    return encode(document, fmt)


def _check_info(document: dict[str, Any], errors: list[str]) -> None:
    info = document.get("info")
    if not isinstance(info, dict):
        errors.append('Missing required "info" object')
        return
    if not info.get("title"):
        errors.append('Missing required "info.title"')
    if not info.get("version"):
        errors.append('Missing required "info.version"')


class DocumentService:
    """Parse, serialise and validate specification documents.

    Stateless; a single instance can be shared, but the
    :class:`~specedit.session.EditorSession` creates its own so that tests
    can inject a replacement.
    """

    def parse(self, content: str) -> ParseResult:
        """Parse JSON or YAML text into a document tree.

        Returns:
            A successful :class:`~specedit.models.ParseResult` carrying the
            tree, its format and dialect, or a failed one carrying the
            error message. A failed result never carries a document.
        """
        try:
            document, fmt, dialect = parse_document(content)
        except ParseError as exc:
            logger.info("Parse failed: %s", exc)
            return ParseResult(success=False, error=str(exc))
        return ParseResult(success=True, document=document, format=fmt, dialect=dialect)

    def serialize(self, document: Any, fmt: DocumentFormat) -> SerializeResult:
        """Serialise a document tree to JSON or YAML text."""
        try:
            content = serialize_document(document, fmt)
        except SerializeError as exc:
            logger.info("Serialize failed: %s", exc)
            return SerializeResult(success=False, error=str(exc))
        return SerializeResult(success=True, content=content)

    def validate(self, document: Any) -> ValidationResult:
        """Run the minimal required-field checks for the document's dialect."""
        errors: list[str] = []
        dialect = try_detect_dialect(document)

        if dialect is None:
            errors.append("Unrecognized specification document")
        elif dialect.is_openapi:
            _check_info(document, errors)
            if document.get("paths") is None and document.get("webhooks") is None:
                errors.append('Document must have either "paths" or "webhooks"')
        else:
            _check_info(document, errors)
            channels = document.get("channels")
            if not isinstance(channels, dict) or not channels:
                errors.append("AsyncAPI document must have at least one channel")

        return ValidationResult(valid=not errors, errors=errors)

    def get_document_type_name(self, document: Any) -> str:
        return document_type_name(document)

    def is_openapi(self, document: Any) -> bool:
        return is_openapi(document)

    def is_asyncapi(self, document: Any) -> bool:
        return is_asyncapi(document)

    def get_document_version(self, document: Any) -> Optional[str]:
        return document_version(document)
