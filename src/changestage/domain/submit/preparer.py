"""Stage a change set into a persistence context."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .assign import InstanceTarget, TrackedTarget, assign_values
from .entry import OperationKind
from .errors import ChangeSetError, UnsupportedOperationError
from .replace import build_replacement
from .resolve import find_entity

if TYPE_CHECKING:
    from collections.abc import Iterable

    from changestage.domain.ports.persistence import PersistenceContext
    from changestage.domain.ports.query import QueryService

    from .entry import ModificationEntry
    from .errors import ErrorKind
    from .schema import TypeDescriptor

log = logging.getLogger(__name__)


@dataclass(slots=True)
class PrepareResult:
    """Outcome of :meth:`ChangeSetPreparer.prepare`.

    ``prepared`` counts entries staged before the first failure. Staged entries are not
    undone here; discarding the context is up to the caller.
    """

    total: int
    prepared: int
    error: ChangeSetError | None = None
    failed_index: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


@dataclass(slots=True)
class ChangeSetPreparer:
    """Translate modification entries into staged context mutations."""

    query_service: QueryService

    async def prepare(
        self,
        change_set: Iterable[ModificationEntry],
        context: PersistenceContext,
    ) -> PrepareResult:
        """Stage every entry in order, stopping at the first failing one."""

        entries = list(change_set)
        result = PrepareResult(total=len(entries), prepared=0)
        for index, entry in enumerate(entries):
            # entry boundary: the only point a pending cancellation can surface, since query
            # services may complete without yielding
            await asyncio.sleep(0)
            try:
                await self.prepare_entry(entry, context)
            except ChangeSetError as exc:
                log.warning(
                    "Change set aborted at entry %d (%s %s): %s [%s]",
                    index,
                    entry.operation,
                    entry.entity_set_name,
                    exc,
                    exc.kind,
                )
                result.error = exc
                result.failed_index = index
                return result
            result.prepared += 1

        log.info("Prepared %d change set entries", result.prepared)
        return result

    async def prepare_entry(self, entry: ModificationEntry, context: PersistenceContext) -> None:
        """Stage a single entry and store the affected entity on it."""

        descriptor = context.schema.resolve_entity_type(entry.entity_set_name)
        log.debug("Preparing %s entry for %s", entry.operation, entry.entity_set_name)

        entity: Any
        match entry.operation:
            case OperationKind.INSERT:
                entity = self._create(entry, descriptor)
                context.collection(entry.entity_set_name).add(entity)
            case OperationKind.DELETE:
                _check_criteria(entry, descriptor)
                entity = await find_entity(entry, self.query_service)
                context.collection(entry.entity_set_name).remove(entity)
            case OperationKind.UPDATE:
                _check_criteria(entry, descriptor)
                entity = await find_entity(entry, self.query_service)
                tracked = context.attach(entity)
                assign_values(TrackedTarget(tracked), entry.local_values)
            case OperationKind.FULL_REPLACE_UPDATE:
                replacement = build_replacement(entry, descriptor)
                entity = context.register_full_replace(replacement)
            case _:
                raise UnsupportedOperationError(entry.entity_set_name, entry.operation)

        entry.entity = entity

    @staticmethod
    def _create[T](entry: ModificationEntry, descriptor: TypeDescriptor[T]) -> T:
        entity = descriptor.construct()
        assign_values(InstanceTarget(descriptor, entity), entry.local_values)
        return entity


def _check_criteria(entry: ModificationEntry, descriptor: TypeDescriptor[Any]) -> None:
    for name in entry.filter_criteria:
        descriptor.field_type(name)
