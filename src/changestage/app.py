"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from changestage.adapters.document import load_change_set
from changestage.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySubmitUnitOfWork,
    is_started,
    startup,
)
from changestage.domain.ports.unit_of_work import SubmitUnitOfWork
from changestage.domain.submit import ChangeSetPreparer

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from changestage.domain.submit import EntitySchema, ModificationEntry, PrepareResult

UnitOfWorkFactory = Callable[[], SubmitUnitOfWork]


log = getLogger(__name__)


def submit_change_set(
    change_set: Sequence[ModificationEntry],
    *,
    schema: EntitySchema,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    dry_run: bool = False,
) -> PrepareResult:
    """Stage ``change_set`` in a fresh unit of work and commit it if every entry succeeded.

    A failed preparation (or ``dry_run``) rolls the unit of work back, which also discards
    entries staged before the failing one.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory(schema)
    log.info("Submitting change set: entries=%s, dry_run=%s", len(change_set), dry_run)

    with effective_uow() as uow:
        resources = uow.repositories
        preparer = ChangeSetPreparer(query_service=resources.queries)
        result = asyncio.run(preparer.prepare(change_set, resources.context))
        if result.ok and not dry_run:
            uow.commit()
        else:
            uow.rollback()

    log.info(
        f"Finished change set: prepared={result.prepared}/{result.total}, "
        f"committed={result.ok and not dry_run}, error={result.error_kind}"
    )
    return result


def submit_change_set_file(
    path: Path,
    *,
    schema: EntitySchema,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    dry_run: bool = False,
) -> PrepareResult:
    """Load a JSON change-set document and submit it."""

    change_set = load_change_set(path)
    return submit_change_set(
        change_set.entries,
        schema=schema,
        unit_of_work_factory=unit_of_work_factory,
        dry_run=dry_run,
    )


def _default_unit_of_work_factory(schema: EntitySchema) -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return partial(SqlAlchemySubmitUnitOfWork, schema)
