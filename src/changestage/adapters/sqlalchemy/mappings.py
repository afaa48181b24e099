"""SQLAlchemy mapping helpers for entity sets."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, Dialect, TypeDecorator, orm
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.inspection import inspect

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import Table
    from sqlalchemy.engine import Engine

    from changestage.domain.submit.schema import EntitySchema, TypeDescriptor

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    """Offset-aware timestamps, stored in UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def is_mapped(cls: type) -> bool:
    try:
        inspect(cls)
    except NoInspectionAvailable:
        return False
    return True


def map_entity_set[T](
    schema: EntitySchema,
    entity_set_name: str,
    cls: type[T],
    table: Table,
    *,
    properties: Mapping[str, Any] | None = None,
    registry: orm.registry | None = None,
) -> TypeDescriptor[T]:
    """Map ``cls`` imperatively onto ``table`` and register it as ``entity_set_name``.

    Mapping an already mapped class is skipped, so schema factories can run more than once
    per process.
    """

    if not is_mapped(cls):
        log.info("Mapping %s onto table %s", cls.__name__, table.name)
        (registry or mapper_registry).map_imperatively(
            cls,
            table,
            properties=dict(properties or {}),
        )
    return schema.register(entity_set_name, cls)


def create_all_tables(engine: Engine, *, registry: orm.registry | None = None) -> None:
    """Create all tables known to the registry."""

    (registry or mapper_registry).metadata.create_all(engine)
