"""SQLAlchemy adapter package for changestage."""

from __future__ import annotations

from .context import (
    SqlAlchemyEntityCollection,
    SqlAlchemyPersistenceContext,
    SqlAlchemyPropertyEntry,
    SqlAlchemyTrackedEntity,
)
from .mappings import UTCDateTime, create_all_tables, map_entity_set, mapper_registry
from .query import SqlAlchemyQueryService
from .unit_of_work import (
    SqlAlchemySubmitUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyEntityCollection",
    "SqlAlchemyPersistenceContext",
    "SqlAlchemyPropertyEntry",
    "SqlAlchemyQueryService",
    "SqlAlchemySubmitUnitOfWork",
    "SqlAlchemyTrackedEntity",
    "StartupError",
    "UTCDateTime",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "map_entity_set",
    "mapper_registry",
    "shutdown",
    "startup",
]
