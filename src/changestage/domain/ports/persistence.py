"""Ports for the persistence context the change set is staged into."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from changestage.domain.submit.schema import EntitySchema, FieldType


@runtime_checkable
class EntityCollection[TEntity](Protocol):
    """Typed collection for one entity set."""

    def add(self, entity: TEntity) -> None: ...

    def remove(self, entity: TEntity) -> None: ...


@runtime_checkable
class PropertyEntry(Protocol):
    """Tracked handle on one field of an attached entity."""

    @property
    def name(self) -> str: ...

    @property
    def field_type(self) -> FieldType: ...

    @property
    def current_value(self) -> object: ...

    @current_value.setter
    def current_value(self, value: object) -> None: ...


@runtime_checkable
class TrackedEntity(Protocol):
    """Attached entity whose field writes are recorded by the context."""

    @property
    def entity(self) -> object: ...

    def property_entry(self, name: str) -> PropertyEntry: ...


@runtime_checkable
class PersistenceContext(Protocol):
    """In-memory change tracker of a store. Staging only, never commits."""

    @property
    def schema(self) -> EntitySchema: ...

    def collection(self, entity_set_name: str) -> EntityCollection[Any]: ...

    def attach(self, entity: object) -> TrackedEntity: ...

    def register_full_replace[TEntity](self, entity: TEntity) -> TEntity:
        """Stage ``entity`` as the complete new state of the row sharing its key.

        Returns the instance the context now tracks for that row.
        """
        ...
