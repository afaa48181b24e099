"""Apply (possibly nested) property mappings onto entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from .coercion import coerce_value
from .errors import UnsupportedFieldTypeError
from .schema import describe, is_describable

if TYPE_CHECKING:
    from changestage.domain.ports.persistence import TrackedEntity

    from .entry import PropertyValue
    from .schema import FieldType, TypeDescriptor


class AssignmentTarget(Protocol):
    """Destination of an assignment: field type lookup plus a field writer."""

    def field_type(self, name: str) -> FieldType: ...

    def set_field(self, name: str, value: object) -> None: ...


@dataclass(slots=True)
class InstanceTarget[T]:
    """Direct field assignment on an instance that is not tracked yet."""

    descriptor: TypeDescriptor[T]
    instance: T

    def field_type(self, name: str) -> FieldType:
        return self.descriptor.field_type(name)

    def set_field(self, name: str, value: object) -> None:
        self.descriptor.set_field(self.instance, name, value)


@dataclass(slots=True)
class TrackedTarget:
    """Assignment through the context's property handles, so changes are recorded."""

    tracked: TrackedEntity

    def field_type(self, name: str) -> FieldType:
        return self.tracked.property_entry(name).field_type

    def set_field(self, name: str, value: object) -> None:
        self.tracked.property_entry(name).current_value = value


def assign_values(target: AssignmentTarget, values: Mapping[str, PropertyValue]) -> None:
    """Coerce every value in ``values`` and write it to ``target``.

    All values are resolved before the first write, so an invalid mapping leaves the target
    untouched.
    """

    resolved = [
        (name, resolve_value(name, target.field_type(name), raw)) for name, raw in values.items()
    ]
    for name, value in resolved:
        target.set_field(name, value)


def resolve_value(name: str, field_type: FieldType, raw: PropertyValue) -> object:
    """Return the value to store in field ``name``."""

    value = coerce_value(field_type, raw)
    if field_type.accepts(value):
        return value
    match value:
        case Mapping():
            return materialize(field_type.python_type, value, field_name=name)
        case _:
            raise UnsupportedFieldTypeError(name, field_type.python_type, value)


def materialize[T](cls: type[T], values: Mapping[str, PropertyValue], *, field_name: str) -> T:
    """Build a blank ``cls`` and populate it from a nested mapping, recursively."""

    if not is_describable(cls):
        raise UnsupportedFieldTypeError(field_name, cls, values)
    try:
        descriptor = describe(cls)
    except TypeError as exc:
        raise UnsupportedFieldTypeError(field_name, cls, values) from exc
    instance = descriptor.construct()
    assign_values(InstanceTarget(descriptor, instance), values)
    return instance
