from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import Select

from changestage.adapters.sqlalchemy import SqlAlchemyPersistenceContext, SqlAlchemyQueryService
from changestage.domain.ports.query import QueryRequest
from changestage.domain.submit import EntityNotFoundError, UnknownFieldError
from tests.helpers.catalog import Category, Dimensions, Product, Unit

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from changestage.domain.submit import EntitySchema


def _seed(session: Session) -> None:
    session.add_all(
        [
            Product(id=6, name="Saw", price=20.0),
            Product(
                id=7,
                name="Hammer",
                price=12.5,
                category=Category.TOOLS,
                released_on=datetime(2020, 5, 1),
                last_modified=datetime(2024, 1, 1, 9, 0, tzinfo=UTC),
                warranty=timedelta(days=365),
                dimensions=Dimensions(width=3.0, height=30.0, unit=Unit.CM),
            ),
        ]
    )
    session.commit()


def test_query_service_filters_by_criteria(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    _seed(sqlite_session)
    queries = SqlAlchemyQueryService(sqlite_session, catalog_schema)

    source = queries.source("Products")
    result = asyncio.run(queries.query(QueryRequest(source.filter_by(id=7))))

    assert isinstance(source, Select)
    assert [product.name for product in result.results] == ["Hammer"]


def test_query_service_rejects_foreign_queryables(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    queries = SqlAlchemyQueryService(sqlite_session, catalog_schema)

    with pytest.raises(TypeError):
        asyncio.run(queries.query(QueryRequest(object())))  # pyright: ignore[reportArgumentType]


def test_mapped_columns_round_trip(sqlite_session: Session) -> None:
    _seed(sqlite_session)
    sqlite_session.expire_all()

    hammer = sqlite_session.get(Product, 7)

    assert hammer is not None
    assert hammer.category is Category.TOOLS
    assert hammer.last_modified == datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
    assert hammer.warranty == timedelta(days=365)
    assert hammer.dimensions == Dimensions(width=3.0, height=30.0, unit=Unit.CM)


def test_tracked_property_writes_mark_entity_dirty(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    _seed(sqlite_session)
    context = SqlAlchemyPersistenceContext(sqlite_session, catalog_schema)
    hammer = sqlite_session.get(Product, 7)
    assert hammer is not None

    tracked = context.attach(hammer)
    price = tracked.property_entry("price")
    price.current_value = 9.99

    assert price.is_modified
    assert not tracked.property_entry("name").is_modified
    assert tracked.is_modified
    assert hammer in sqlite_session.dirty
    assert price.field_type.python_type is float


def test_attach_adds_detached_entities(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    _seed(sqlite_session)
    hammer = sqlite_session.get(Product, 7)
    assert hammer is not None
    sqlite_session.expunge(hammer)

    tracked = SqlAlchemyPersistenceContext(sqlite_session, catalog_schema).attach(hammer)

    assert tracked.entity is hammer
    assert hammer in sqlite_session


def test_unknown_property_is_rejected(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    _seed(sqlite_session)
    hammer = sqlite_session.get(Product, 7)
    tracked = SqlAlchemyPersistenceContext(sqlite_session, catalog_schema).attach(hammer)

    with pytest.raises(UnknownFieldError):
        tracked.property_entry("colour")


def test_collection_add_and_remove(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    _seed(sqlite_session)
    context = SqlAlchemyPersistenceContext(sqlite_session, catalog_schema)
    products = context.collection("Products")
    saw = sqlite_session.get(Product, 6)
    widget = Product(name="Widget")

    products.add(widget)
    products.remove(saw)

    assert widget in sqlite_session.new
    assert saw in sqlite_session.deleted


def test_collection_rejects_other_types(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    products = SqlAlchemyPersistenceContext(sqlite_session, catalog_schema).collection("Products")

    with pytest.raises(TypeError):
        products.add(object())


def test_full_replace_overwrites_every_column(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    _seed(sqlite_session)
    context = SqlAlchemyPersistenceContext(sqlite_session, catalog_schema)

    merged = context.register_full_replace(Product(id=7, price=9.99))
    sqlite_session.commit()
    sqlite_session.expire_all()

    stored = sqlite_session.get(Product, 7)
    assert stored is merged
    assert stored.price == 9.99
    assert stored.name == ""
    assert stored.category is None
    assert stored.released_on is None
    assert stored.warranty is None
    assert stored.dimensions == Dimensions()


def test_full_replace_of_missing_row_is_not_inserted(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    _seed(sqlite_session)
    context = SqlAlchemyPersistenceContext(sqlite_session, catalog_schema)

    with pytest.raises(EntityNotFoundError) as excinfo:
        context.register_full_replace(Product(id=999, price=9.99))

    assert excinfo.value.entity_set_name == "Products"
    assert excinfo.value.criteria == {"id": 999}
    assert not sqlite_session.new
    sqlite_session.commit()
    assert sqlite_session.get(Product, 999) is None


def test_full_replace_without_key_value_is_rejected(
    sqlite_session: Session,
    catalog_schema: EntitySchema,
) -> None:
    context = SqlAlchemyPersistenceContext(sqlite_session, catalog_schema)

    with pytest.raises(EntityNotFoundError):
        context.register_full_replace(Product(price=9.99))

    assert not sqlite_session.new
