"""Change-application engine: stage generic modification entries into a typed context."""

from __future__ import annotations

from .assign import AssignmentTarget, InstanceTarget, TrackedTarget, assign_values, materialize
from .coercion import coerce_value, parse_enum
from .entry import (
    ChangeSet,
    ModificationEntry,
    NestedValues,
    OperationKind,
    PropertyValue,
    Scalar,
    SequenceValues,
)
from .errors import (
    AmbiguousEntityError,
    ChangeSetError,
    EntityNotFoundError,
    EnumParseError,
    ErrorKind,
    UnknownEntitySetError,
    UnknownFieldError,
    UnsupportedFieldTypeError,
    UnsupportedOperationError,
)
from .preparer import ChangeSetPreparer, PrepareResult
from .replace import build_replacement
from .resolve import find_entity
from .schema import KEEP_OFFSET, EntitySchema, FieldType, TypeDescriptor, describe

__all__ = [
    "KEEP_OFFSET",
    "AmbiguousEntityError",
    "AssignmentTarget",
    "ChangeSet",
    "ChangeSetError",
    "ChangeSetPreparer",
    "EntityNotFoundError",
    "EntitySchema",
    "EnumParseError",
    "ErrorKind",
    "FieldType",
    "InstanceTarget",
    "ModificationEntry",
    "NestedValues",
    "OperationKind",
    "PrepareResult",
    "PropertyValue",
    "Scalar",
    "SequenceValues",
    "TrackedTarget",
    "TypeDescriptor",
    "UnknownEntitySetError",
    "UnknownFieldError",
    "UnsupportedFieldTypeError",
    "UnsupportedOperationError",
    "assign_values",
    "build_replacement",
    "coerce_value",
    "describe",
    "find_entity",
    "materialize",
    "parse_enum",
]
