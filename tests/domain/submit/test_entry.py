from __future__ import annotations

import pytest

from changestage.domain.submit import ChangeSet, ModificationEntry, OperationKind
from tests.helpers.memory import InMemoryQuery


@pytest.mark.parametrize(
    "operation",
    [OperationKind.DELETE, OperationKind.UPDATE, OperationKind.FULL_REPLACE_UPDATE],
)
def test_keyed_operations_require_key_values(operation: OperationKind) -> None:
    with pytest.raises(ValueError, match="requires key values"):
        ModificationEntry(entity_set_name="Products", operation=operation)


def test_insert_needs_no_key() -> None:
    entry = ModificationEntry(
        entity_set_name="Products",
        operation=OperationKind.INSERT,
        local_values={"name": "Widget"},
    )

    assert entry.is_new
    assert entry.entity is None


@pytest.mark.parametrize(
    ("operation", "flag"),
    [
        (OperationKind.INSERT, "is_new"),
        (OperationKind.DELETE, "is_delete"),
        (OperationKind.UPDATE, "is_update"),
        (OperationKind.FULL_REPLACE_UPDATE, "is_full_replace_update"),
    ],
)
def test_operation_flags_are_mutually_exclusive(operation: OperationKind, flag: str) -> None:
    entry = ModificationEntry(
        entity_set_name="Products",
        operation=operation,
        entity_key={"id": 1},
    )
    flags = ("is_new", "is_delete", "is_update", "is_full_replace_update")

    assert [name for name in flags if getattr(entry, name)] == [flag]


def test_apply_to_filters_on_key_and_concurrency_values() -> None:
    entry = ModificationEntry(
        entity_set_name="Shipments",
        operation=OperationKind.UPDATE,
        entity_key={"id": 3},
        original_values={"etag": "v1"},
    )

    query = entry.apply_to(InMemoryQuery(rows=[]))

    assert query.criteria == {"id": 3, "etag": "v1"}


def test_full_replace_ignores_concurrency_values() -> None:
    entry = ModificationEntry(
        entity_set_name="Shipments",
        operation=OperationKind.FULL_REPLACE_UPDATE,
        entity_key={"id": 3},
        original_values={"etag": "v1"},
    )

    assert entry.filter_criteria == {"id": 3}


def test_change_set_keeps_entry_order() -> None:
    first = ModificationEntry(entity_set_name="Products", operation=OperationKind.INSERT)
    second = ModificationEntry(
        entity_set_name="Products",
        operation=OperationKind.DELETE,
        entity_key={"id": 1},
    )
    change_set = ChangeSet.of([first])
    change_set.add(second)

    assert list(change_set) == [first, second]
    assert len(change_set) == 2
