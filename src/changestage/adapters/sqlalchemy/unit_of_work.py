"""SQLAlchemy unit of work: one session per submitted change set."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from changestage.adapters.sqlalchemy.context import SqlAlchemyPersistenceContext
from changestage.adapters.sqlalchemy.mappings import create_all_tables
from changestage.adapters.sqlalchemy.query import SqlAlchemyQueryService
from changestage.config.storage import get_database_config
from changestage.domain.ports.unit_of_work import SubmitResources

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from changestage.domain.submit.schema import EntitySchema

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the adapter is used before ``startup()`` or started twice."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    _sessions: sessionmaker[Session] | None = field(default=None, repr=False)

    def bind(self, engine: Engine | None) -> None:
        if self.engine is not None and self.engine is not engine:
            self.engine.dispose()
        self.engine = engine
        self._sessions = None

    def open_session(self) -> Session:
        if self.engine is None:
            raise StartupError(
                "SQLAlchemy adapter not started; call "
                "changestage.adapters.sqlalchemy.startup() first."
            )
        if self._sessions is None:
            # entities stay readable after commit for reporting
            self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._sessions()


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or a new one for ``database_uri``) and create tables.

    Without ``engine`` or ``database_uri`` the database comes from :mod:`changestage.config`.
    A second call raises :class:`StartupError` unless ``force`` is set.
    """

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already started; pass force=True to rebind.")

    if engine is None:
        engine = create_engine(get_database_config(uri=database_uri).uri, future=True)
    create_all_tables(engine)
    _STATE.bind(engine)
    log.info("SQLAlchemy adapter started on %s", engine.url)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine. Safe to call when not started."""

    _STATE.bind(None)


class SqlAlchemySubmitUnitOfWork:
    """Context manager handing out a session-backed context and query service.

    Nothing is committed implicitly: leaving the block without :meth:`commit` discards the
    staged changes, and an exception inside the block rolls back first.
    """

    def __init__(self, schema: EntitySchema) -> None:
        self.schema = schema
        if not is_started():
            raise StartupError("Start the SQLAlchemy adapter before creating a unit of work.")
        self._session: Session | None = None
        self._resources: SubmitResources | None = None

    def __enter__(self) -> SqlAlchemySubmitUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = _STATE.open_session()
        self._session = session
        self._resources = SubmitResources(
            context=SqlAlchemyPersistenceContext(session, self.schema),
            queries=SqlAlchemyQueryService(session, self.schema),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session, self._session, self._resources = self.session, None, None
        try:
            if exc_type is not None:
                log.debug("Rolling back unit of work after %s", exc_type.__name__)
                session.rollback()
        finally:
            session.close()
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> SubmitResources:
        if self._resources is None:
            raise StartupError("Unit of work is not open")
        return self._resources

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session


if TYPE_CHECKING:
    from typing import cast

    from changestage.domain.ports.unit_of_work import SubmitUnitOfWork

    _uow_check: SubmitUnitOfWork = SqlAlchemySubmitUnitOfWork(cast("EntitySchema", object()))
