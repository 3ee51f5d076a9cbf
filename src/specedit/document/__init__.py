"""Document layer -- codec, dialect detection, service facade and state container.

Typical usage::

    from specedit.document import DocumentService, DocumentState

    service = DocumentService()
    result = service.parse(text)
    if result.success:
        state = DocumentState()
        state.set_document(
            result.document,
            result.format,
            "openapi.yaml",
            service.get_document_type_name(result.document),
            result.dialect,
        )

Sub-modules:

* :mod:`~specedit.document.codec` -- JSON/YAML decode and encode.
* :mod:`~specedit.document.dialect` -- Dialect detection and pure queries.
* :mod:`~specedit.document.service` -- Record-returning service facade.
* :mod:`~specedit.document.state` -- The document state container.
"""

from specedit.document.codec import decode, detect_format, encode
from specedit.document.dialect import detect_dialect, document_type_name
from specedit.document.service import DocumentService, parse_document, serialize_document
from specedit.document.state import DocumentState

__all__ = [
    "DocumentService",
    "DocumentState",
    "decode",
    "detect_dialect",
    "detect_format",
    "document_type_name",
    "encode",
    "parse_document",
    "serialize_document",
]
