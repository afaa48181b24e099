"""Query subsystem backed by SQLAlchemy ``select`` statements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, select

from changestage.domain.ports.query import QueryRequest, QueryResult

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from changestage.domain.submit.schema import EntitySchema


class SqlAlchemyQueryService:
    def __init__(self, session: Session, schema: EntitySchema) -> None:
        self.session = session
        self.schema = schema

    def source(self, entity_set_name: str) -> Select[Any]:
        descriptor = self.schema.resolve_entity_type(entity_set_name)
        return select(descriptor.cls)

    async def query(self, request: QueryRequest) -> QueryResult:
        statement = request.query
        if not isinstance(statement, Select):
            raise TypeError(f"Expected a SQLAlchemy Select, got {type(statement).__name__}")
        # autoflush makes entities staged by earlier entries visible here. The sync session
        # blocks without yielding, so cancellation lands at entry boundaries only.
        rows = self.session.execute(statement).scalars().all()
        return QueryResult(results=tuple(rows))


if TYPE_CHECKING:
    from typing import cast

    from changestage.domain.ports.query import QueryService

    _query_check: QueryService = SqlAlchemyQueryService(
        cast("Session", object()), cast("EntitySchema", object())
    )
