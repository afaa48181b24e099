"""Modification entries and change sets."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum, StrEnum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from changestage.domain.ports.query import Queryable


type Scalar = (
    str | int | float | bool | Decimal | date | datetime | time | timedelta | UUID | Enum | None
)
type NestedValues = Mapping[str, PropertyValue]
type SequenceValues = Sequence[PropertyValue]
type PropertyValue = Scalar | NestedValues | SequenceValues


class OperationKind(StrEnum):
    INSERT = "insert"
    DELETE = "delete"
    UPDATE = "update"
    FULL_REPLACE_UPDATE = "replace"


_KEYED_OPERATIONS = frozenset(
    {OperationKind.DELETE, OperationKind.UPDATE, OperationKind.FULL_REPLACE_UPDATE}
)


@dataclass(slots=True, kw_only=True)
class ModificationEntry:
    """One requested change against an entity set.

    ``entity`` stays ``None`` until the entry has been prepared.
    """

    entity_set_name: str
    operation: OperationKind | None
    entity_key: Mapping[str, object] = field(default_factory=dict)
    local_values: Mapping[str, PropertyValue] = field(default_factory=dict)
    original_values: Mapping[str, object] = field(default_factory=dict)
    entity: object | None = None

    def __post_init__(self) -> None:
        if self.operation in _KEYED_OPERATIONS and not self.entity_key:
            raise ValueError(
                f"{self.operation} entry for {self.entity_set_name!r} requires key values"
            )

    @property
    def is_new(self) -> bool:
        return self.operation is OperationKind.INSERT

    @property
    def is_delete(self) -> bool:
        return self.operation is OperationKind.DELETE

    @property
    def is_update(self) -> bool:
        return self.operation is OperationKind.UPDATE

    @property
    def is_full_replace_update(self) -> bool:
        return self.operation is OperationKind.FULL_REPLACE_UPDATE

    @property
    def filter_criteria(self) -> dict[str, object]:
        """Key values plus, for deletes and updates, the concurrency-check values."""

        criteria = dict(self.entity_key)
        if self.is_delete or self.is_update:
            for name, value in self.original_values.items():
                criteria.setdefault(name, value)
        return criteria

    def apply_to[Q: Queryable](self, query: Q) -> Q:
        """Restrict ``query`` to the entity this entry addresses."""

        return query.filter_by(**self.filter_criteria)


@dataclass(slots=True)
class ChangeSet:
    """Ordered batch of modification entries."""

    entries: list[ModificationEntry] = field(default_factory=list)

    @classmethod
    def of(cls, entries: Sequence[ModificationEntry]) -> ChangeSet:
        return cls(entries=list(entries))

    def add(self, entry: ModificationEntry) -> None:
        self.entries.append(entry)

    def __iter__(self) -> Iterator[ModificationEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
