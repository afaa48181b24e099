"""Error taxonomy for change-set preparation."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


class ErrorKind(StrEnum):
    UNSUPPORTED_OPERATION = "unsupported_operation"
    ENTITY_NOT_FOUND = "entity_not_found"
    AMBIGUOUS_ENTITY = "ambiguous_entity"
    UNSUPPORTED_FIELD_TYPE = "unsupported_field_type"
    UNKNOWN_FIELD = "unknown_field"
    ENUM_PARSE_FAILURE = "enum_parse_failure"
    UNKNOWN_ENTITY_SET = "unknown_entity_set"


class ChangeSetError(Exception):
    """Base class for errors that abort the preparation of a change set."""

    kind: ErrorKind


class UnsupportedOperationError(ChangeSetError):
    """Raised when an entry is not an insert, delete, update or full replace."""

    kind = ErrorKind.UNSUPPORTED_OPERATION

    def __init__(self, entity_set_name: str, operation: object) -> None:
        super().__init__(
            f"Entry for {entity_set_name!r} is not a supported create/update/delete "
            f"operation (got {operation!r})"
        )
        self.entity_set_name = entity_set_name
        self.operation = operation


class EntityNotFoundError(ChangeSetError):
    """Raised when resolution matched no entity.

    The query filters on key values and concurrency-check values alike, so this covers both
    a missing row and a stale concurrency token.
    """

    kind = ErrorKind.ENTITY_NOT_FOUND

    def __init__(self, entity_set_name: str, criteria: Mapping[str, object]) -> None:
        super().__init__(f"No {entity_set_name!r} entity matches {dict(criteria)!r}")
        self.entity_set_name = entity_set_name
        self.criteria = dict(criteria)


class AmbiguousEntityError(ChangeSetError):
    """Raised when resolution matched more than one entity."""

    kind = ErrorKind.AMBIGUOUS_ENTITY

    def __init__(self, entity_set_name: str, criteria: Mapping[str, object], count: int) -> None:
        super().__init__(
            f"Expected exactly one {entity_set_name!r} entity for {dict(criteria)!r}, "
            f"found {count}"
        )
        self.entity_set_name = entity_set_name
        self.criteria = dict(criteria)
        self.count = count


class UnsupportedFieldTypeError(ChangeSetError):
    """Raised when a value cannot be reconciled with the declared field type."""

    kind = ErrorKind.UNSUPPORTED_FIELD_TYPE

    def __init__(self, field_name: str, declared: type, value: object) -> None:
        super().__init__(
            f"Unsupported value for property {field_name!r}: expected "
            f"{declared.__name__}, got {type(value).__name__}"
        )
        self.field_name = field_name
        self.declared = declared
        self.value = value


class UnknownFieldError(ChangeSetError):
    """Raised when a payload names a field the target type does not have."""

    kind = ErrorKind.UNKNOWN_FIELD

    def __init__(self, type_name: str, field_name: str) -> None:
        super().__init__(f"{type_name} has no field {field_name!r}")
        self.type_name = type_name
        self.field_name = field_name


class EnumParseError(ChangeSetError, ValueError):
    """Raised when text does not name a member of the declared enumeration."""

    kind = ErrorKind.ENUM_PARSE_FAILURE

    def __init__(self, enum_name: str, value: object) -> None:
        super().__init__(f"{value!r} is not a member of {enum_name}")
        self.enum_name = enum_name
        self.value = value


class UnknownEntitySetError(ChangeSetError):
    """Raised when an entity-set name is not registered in the schema."""

    kind = ErrorKind.UNKNOWN_ENTITY_SET

    def __init__(self, entity_set_name: str) -> None:
        super().__init__(f"Unknown entity set {entity_set_name!r}")
        self.entity_set_name = entity_set_name
