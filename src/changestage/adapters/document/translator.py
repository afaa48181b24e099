"""Translate change-set documents into modification entries.

JSON cannot express dates, times or decimals, so a single-key object whose key starts with
``$`` is read as a typed literal::

    {"$date": "2024-01-05"}
    {"$datetime": "2024-01-05T10:30:00+02:00"}
    {"$time": "08:30:00"}
    {"$decimal": "9.99"}

Every other object is kept as a nested mapping.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Final

from changestage.domain.submit.entry import ChangeSet, ModificationEntry

from .schema import ChangeSetDocument, EntryDocument

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from pathlib import Path

    from pydantic import JsonValue

    from changestage.domain.submit.entry import PropertyValue, Scalar

log = logging.getLogger(__name__)

_LITERAL_PARSERS: Final[dict[str, Callable[[str], Scalar]]] = {
    "$date": date.fromisoformat,
    "$datetime": datetime.fromisoformat,
    "$time": time.fromisoformat,
    "$decimal": Decimal,
}


def load_change_set(path: Path) -> ChangeSet:
    """Read and translate the change-set document at ``path``."""

    document = ChangeSetDocument.model_validate_json(path.read_bytes())
    change_set = translate_document(document)
    log.info("Loaded %d change set entries from %s", len(change_set), path)
    return change_set


def translate_document(document: ChangeSetDocument) -> ChangeSet:
    return ChangeSet.of([translate_entry(entry) for entry in document.entries])


def translate_entry(document: EntryDocument) -> ModificationEntry:
    return ModificationEntry(
        entity_set_name=document.entity_set,
        operation=document.operation,
        entity_key=_translate_mapping(document.key),
        local_values=_translate_mapping(document.values),
        original_values=_translate_mapping(document.original_values),
    )


def translate_value(value: JsonValue) -> PropertyValue:
    match value:
        case dict() if len(value) == 1 and next(iter(value)).startswith("$"):
            ((tag, raw),) = value.items()
            return _parse_literal(tag, raw)
        case dict():
            return _translate_mapping(value)
        case list():
            return [translate_value(item) for item in value]
        case _:
            return value


def _translate_mapping(values: Mapping[str, JsonValue]) -> dict[str, PropertyValue]:
    return {name: translate_value(value) for name, value in values.items()}


def _parse_literal(tag: str, raw: JsonValue) -> Scalar:
    parser = _LITERAL_PARSERS.get(tag)
    if parser is None:
        raise ValueError(f"Unknown typed literal {tag!r}")
    if not isinstance(raw, str):
        raise ValueError(f"Typed literal {tag!r} expects a string, got {type(raw).__name__}")
    try:
        return parser(raw)
    except (ValueError, InvalidOperation) as exc:
        raise ValueError(f"Invalid {tag} literal: {raw!r}") from exc
