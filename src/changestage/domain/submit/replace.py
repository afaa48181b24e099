"""Build replacement instances for full-replace updates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .assign import InstanceTarget, assign_values

if TYPE_CHECKING:
    from .entry import ModificationEntry
    from .schema import TypeDescriptor


def build_replacement[T](entry: ModificationEntry, descriptor: TypeDescriptor[T]) -> T:
    """Return a new instance holding only the entry's key and local values.

    Keys are applied first so they are always present, local values second so they may
    overwrite them. Every other field keeps its default.
    """

    instance = descriptor.construct()
    target = InstanceTarget(descriptor, instance)
    assign_values(target, entry.entity_key)
    assign_values(target, entry.local_values)
    return instance
