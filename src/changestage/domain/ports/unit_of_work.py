"""Unit-of-work abstractions for staging and committing a change set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from changestage.domain.ports.persistence import PersistenceContext
    from changestage.domain.ports.query import QueryService


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of collaborators managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class SubmitResources(RepositoryCollection):
    """Persistence context and query service bound to the same session."""

    context: PersistenceContext
    queries: QueryService


type SubmitUnitOfWork = UnitOfWork[SubmitResources]
