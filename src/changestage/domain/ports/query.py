"""Ports for the query subsystem used during entity resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class Queryable(Protocol):
    """Query under construction that accepts equality filters."""

    def filter_by(self, **criteria: object) -> Self: ...


@dataclass(frozen=True, slots=True)
class QueryRequest:
    query: Queryable


@dataclass(frozen=True, slots=True)
class QueryResult:
    results: Sequence[object] = field(default_factory=tuple)


@runtime_checkable
class QueryService(Protocol):
    """Resolves entity-set names into queryables and executes them."""

    def source(self, entity_set_name: str) -> Queryable: ...

    async def query(self, request: QueryRequest) -> QueryResult: ...
