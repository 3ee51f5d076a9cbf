"""Validation problems reported against the current document."""

from specedit.validation.store import ValidationStore, problems_from_validation

__all__ = ["ValidationStore", "problems_from_validation"]
