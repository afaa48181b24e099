"""Persistence context backed by a SQLAlchemy session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.inspection import inspect

from changestage.domain.submit.errors import EntityNotFoundError, UnknownFieldError
from changestage.domain.submit.schema import describe

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from changestage.domain.submit.schema import EntitySchema, FieldType, TypeDescriptor

log = logging.getLogger(__name__)


class SqlAlchemyEntityCollection[TEntity]:
    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        self._check(entity)
        self.session.add(entity)

    def remove(self, entity: TEntity) -> None:
        self._check(entity)
        self.session.delete(entity)

    def _check(self, entity: TEntity) -> None:
        if not isinstance(entity, self._entity_cls):
            raise TypeError(
                f"Expected {self._entity_cls.__name__}, got {type(entity).__name__}"
            )


class SqlAlchemyPropertyEntry:
    """Field handle writing through the instrumented attribute."""

    def __init__(self, entity: object, name: str, field_type: FieldType) -> None:
        self._entity = entity
        self._name = name
        self._field_type = field_type

    @property
    def name(self) -> str:
        return self._name

    @property
    def field_type(self) -> FieldType:
        return self._field_type

    @property
    def current_value(self) -> object:
        return getattr(self._entity, self._name)

    @current_value.setter
    def current_value(self, value: object) -> None:
        setattr(self._entity, self._name, value)

    @property
    def is_modified(self) -> bool:
        return inspect(self._entity).attrs[self._name].history.has_changes()


class SqlAlchemyTrackedEntity:
    def __init__(self, session: Session, entity: object, descriptor: TypeDescriptor[Any]) -> None:
        self.session = session
        self._entity = entity
        self._descriptor = descriptor

    @property
    def entity(self) -> object:
        return self._entity

    @property
    def is_modified(self) -> bool:
        return self.session.is_modified(self._entity)

    def property_entry(self, name: str) -> SqlAlchemyPropertyEntry:
        field_type = self._descriptor.field_type(name)
        if name not in inspect(type(self._entity)).attrs:
            raise UnknownFieldError(self._descriptor.name, name)
        return SqlAlchemyPropertyEntry(self._entity, name, field_type)


class SqlAlchemyPersistenceContext:
    """Stages change-set mutations in a session. Committing is left to the unit of work."""

    def __init__(self, session: Session, schema: EntitySchema) -> None:
        self.session = session
        self._schema = schema

    @property
    def schema(self) -> EntitySchema:
        return self._schema

    def collection(self, entity_set_name: str) -> SqlAlchemyEntityCollection[Any]:
        descriptor = self._schema.resolve_entity_type(entity_set_name)
        return SqlAlchemyEntityCollection(self.session, descriptor.cls)

    def attach(self, entity: object) -> SqlAlchemyTrackedEntity:
        if entity not in self.session:
            self.session.add(entity)
        return SqlAlchemyTrackedEntity(self.session, entity, describe(type(entity)))

    def register_full_replace[TEntity](self, entity: TEntity) -> TEntity:
        """Overwrite the stored row sharing ``entity``'s primary key with ``entity``.

        The row must exist: a replacement is never inserted.
        """

        mapper = inspect(type(entity))
        key_names = [mapper.get_property_by_column(column).key for column in mapper.primary_key]
        key = {name: getattr(entity, name) for name in key_names}
        identity = tuple(key.values())
        # rows staged by earlier entries must be visible to the lookup
        self.session.flush()
        if None in identity or self.session.get(type(entity), identity) is None:
            raise EntityNotFoundError(self._entity_set_name(type(entity)), key)
        # merge copies every attribute of the replacement, defaults included, onto the row
        # loaded above
        merged = self.session.merge(entity)
        log.debug("Registered full replacement of %s %s", type(entity).__name__, key)
        return merged

    def _entity_set_name(self, cls: type) -> str:
        for name in self._schema.entity_set_names:
            if self._schema.resolve_entity_type(name).cls is cls:
                return name
        return cls.__name__


if TYPE_CHECKING:
    from typing import cast

    from changestage.domain.ports.persistence import PersistenceContext

    _context_check: PersistenceContext = SqlAlchemyPersistenceContext(
        cast("Session", object()), cast("EntitySchema", object())
    )
