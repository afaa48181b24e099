"""JSON change-set document adapter."""

from __future__ import annotations

from .schema import ChangeSetDocument, EntryDocument
from .translator import load_change_set, translate_document, translate_entry, translate_value

__all__ = [
    "ChangeSetDocument",
    "EntryDocument",
    "load_change_set",
    "translate_document",
    "translate_entry",
    "translate_value",
]
