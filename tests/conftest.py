from __future__ import annotations

import asyncio
import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from changestage.adapters.sqlalchemy import create_all_tables
from changestage.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySubmitUnitOfWork,
    shutdown,
    startup,
)
from changestage.domain.submit import ChangeSetPreparer, EntitySchema
from tests.helpers.catalog import build_catalog_schema, build_memory_schema
from tests.helpers.memory import InMemoryPersistenceContext, InMemoryQueryService, InMemoryStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from changestage.domain.submit import ModificationEntry, PrepareResult


@pytest.fixture
def memory_schema() -> EntitySchema:
    return build_memory_schema()


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def memory_context(memory_schema: EntitySchema) -> InMemoryPersistenceContext:
    return InMemoryPersistenceContext(memory_schema)


@pytest.fixture
def memory_queries(memory_store: InMemoryStore) -> InMemoryQueryService:
    return InMemoryQueryService(memory_store)


@pytest.fixture
def prepare_in_memory(
    memory_context: InMemoryPersistenceContext,
    memory_queries: InMemoryQueryService,
) -> Callable[[list[ModificationEntry]], PrepareResult]:
    def run(entries: list[ModificationEntry]) -> PrepareResult:
        preparer = ChangeSetPreparer(query_service=memory_queries)
        return asyncio.run(preparer.prepare(entries, memory_context))

    return run


@pytest.fixture
def catalog_schema() -> EntitySchema:
    return build_catalog_schema()


@pytest.fixture
def sqlite_engine(catalog_schema: EntitySchema) -> Iterator[Engine]:
    _ = catalog_schema
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
    catalog_schema: EntitySchema,
) -> Iterator[Callable[[], SqlAlchemySubmitUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemySubmitUnitOfWork:
        return SqlAlchemySubmitUnitOfWork(catalog_schema)

    try:
        yield factory
    finally:
        shutdown()
