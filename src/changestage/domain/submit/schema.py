"""Entity schema registry.

Entity sets are registered by name against a dataclass. Each class is described once (the
result is cached) into a :class:`TypeDescriptor`, which is the only capability the engine
uses to construct blank instances and read or write fields by name.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date, datetime
from functools import cache
from types import MappingProxyType, NoneType, UnionType
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Final,
    TypeAliasType,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .errors import UnknownEntitySetError, UnknownFieldError

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class KeepOffset:
    """``Annotated`` marker for datetime fields that store their UTC offset."""


KEEP_OFFSET: Final = KeepOffset()


@dataclass(frozen=True, slots=True)
class FieldType:
    """Declared type of one field, with optionality and offset handling unwrapped."""

    python_type: type
    nullable: bool = False
    keep_offset: bool = False

    def accepts(self, value: object) -> bool:
        if value is None:
            return True
        # int is acceptable wherever float is (numeric tower), bool is not
        if self.python_type is float and type(value) is int:
            return True
        # subclasses that would be truncated on storage
        if isinstance(value, bool) and self.python_type is int:
            return False
        if isinstance(value, datetime) and self.python_type is date:
            return False
        return isinstance(value, self.python_type)


@dataclass(frozen=True, slots=True)
class TypeDescriptor[T]:
    cls: type[T]
    fields: Mapping[str, FieldType]

    @property
    def name(self) -> str:
        return self.cls.__name__

    def construct(self) -> T:
        """Return a blank instance: every field at its declared default."""

        return self.cls()

    def field_type(self, name: str) -> FieldType:
        try:
            return self.fields[name]
        except KeyError:
            raise UnknownFieldError(self.name, name) from None

    def get_field(self, instance: T, name: str) -> object:
        self.field_type(name)
        return getattr(instance, name)

    def set_field(self, instance: T, name: str, value: object) -> None:
        self.field_type(name)
        setattr(instance, name, value)


def is_describable(cls: type) -> bool:
    return isinstance(cls, type) and dataclasses.is_dataclass(cls)


@cache
def describe[T](cls: type[T]) -> TypeDescriptor[T]:
    """Build the descriptor for a dataclass.

    Raises ``TypeError`` if ``cls`` is not a dataclass or has a field without a default,
    since a blank instance could not be constructed.
    """

    if not is_describable(cls):
        raise TypeError(f"{cls!r} is not a dataclass")

    hints = get_type_hints(cls, include_extras=True)
    fields: dict[str, FieldType] = {}
    for field in dataclasses.fields(cls):
        if (
            field.init
            and field.default is dataclasses.MISSING
            and field.default_factory is dataclasses.MISSING
        ):
            raise TypeError(f"{cls.__name__}.{field.name} has no default value")
        if field.name.startswith("_"):
            continue
        fields[field.name] = field_type_from_hint(hints[field.name])

    log.debug("Described %s with fields %s", cls.__name__, ", ".join(fields))
    return TypeDescriptor(cls=cls, fields=MappingProxyType(fields))


def field_type_from_hint(hint: object) -> FieldType:
    """Reduce a type hint to the runtime class a value is checked against."""

    nullable = False
    keep_offset = False
    while True:
        if isinstance(hint, TypeAliasType):
            hint = hint.__value__
            continue
        origin = get_origin(hint)
        if origin is Annotated:
            base, *extras = get_args(hint)
            keep_offset = keep_offset or any(isinstance(extra, KeepOffset) for extra in extras)
            hint = base
            continue
        if origin is Union or origin is UnionType:
            members = [arg for arg in get_args(hint) if arg is not NoneType]
            nullable = nullable or len(members) < len(get_args(hint))
            hint = members[0] if len(members) == 1 else object
            continue
        break

    if origin is not None and isinstance(origin, type):
        python_type: type = origin
    elif isinstance(hint, type):
        python_type = hint
    else:
        # Any, Literal, TypeVar and friends are not checked
        python_type = object
    return FieldType(python_type=python_type, nullable=nullable, keep_offset=keep_offset)


class EntitySchema:
    """Lookup table from entity-set name to the descriptor of its entity type."""

    def __init__(self) -> None:
        self._entity_sets: dict[str, TypeDescriptor[Any]] = {}

    def register[T](self, entity_set_name: str, cls: type[T]) -> TypeDescriptor[T]:
        existing = self._entity_sets.get(entity_set_name)
        if existing is not None:
            if existing.cls is not cls:
                raise ValueError(
                    f"Entity set {entity_set_name!r} is already bound to {existing.name}"
                )
            return existing
        descriptor = describe(cls)
        self._entity_sets[entity_set_name] = descriptor
        log.debug("Registered entity set %s -> %s", entity_set_name, descriptor.name)
        return descriptor

    def resolve_entity_type(self, entity_set_name: str) -> TypeDescriptor[Any]:
        try:
            return self._entity_sets[entity_set_name]
        except KeyError:
            raise UnknownEntitySetError(entity_set_name) from None

    @property
    def entity_set_names(self) -> tuple[str, ...]:
        return tuple(self._entity_sets)

    def __contains__(self, entity_set_name: object) -> bool:
        return entity_set_name in self._entity_sets
