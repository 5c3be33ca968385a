"""
Tests for the Schema Registrar and the relationship table
"""

import pytest
import pytest_asyncio
from decimal import Decimal
from sqlalchemy import inspect
from sqlalchemy.orm import selectinload
from sqlmodel import select

from netcafe.core.exceptions import SchemaError
from netcafe.models.tenant import RELATIONS, TENANT_MODELS, Category, Dish
from netcafe.models.tenant.relationships import Cardinality, Relation
from netcafe.tenancy.entities import EntityKind
from netcafe.tenancy.schema import EntitySchemaSet, SchemaRegistrar


@pytest_asyncio.fixture
async def connection(runtime):
    await runtime.connections.create_database("tenant_schematest")
    connection = await runtime.connections.open("tenant_schematest")
    yield connection
    await connection.dispose()


async def _table_names(connection):
    async with connection.engine.connect() as conn:
        return set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))


@pytest.mark.asyncio
async def test_register_creates_every_tenant_table(connection):
    schema = await SchemaRegistrar().register(connection)

    assert schema.database_name == "tenant_schematest"
    assert await _table_names(connection) == {t.name for t in schema.tables}
    assert len(schema.tables) == len(EntityKind)
    # Master tables never land in a tenant database
    assert "tenants" not in await _table_names(connection)


@pytest.mark.asyncio
async def test_register_twice_is_a_no_op(connection):
    registrar = SchemaRegistrar()
    schema = await registrar.register(connection)

    async with connection.session() as session:
        session.add(schema.role(name="Waiter"))
        await session.commit()

    tables_before = await _table_names(connection)
    await registrar.register(connection)

    assert await _table_names(connection) == tables_before
    async with connection.session() as session:
        roles = (await session.exec(select(schema.role))).all()
    assert [r.name for r in roles] == ["Waiter"]


@pytest.mark.asyncio
async def test_relationships_load_eagerly(connection):
    schema = await SchemaRegistrar().register(connection)

    async with connection.session() as session:
        category = schema.category(name="Starters")
        session.add(category)
        await session.flush()
        session.add(schema.dish(category_id=category.category_id, name="Soup", price=Decimal("4.50")))
        session.add(schema.dish(category_id=category.category_id, name="Salad", price=Decimal("5.00")))
        await session.commit()

    async with connection.session() as session:
        result = await session.exec(select(Category).options(selectinload(Category.dishes)))
        loaded = result.one()
        dish = (await session.exec(select(Dish).options(selectinload(Dish.category)))).first()

    assert sorted(d.name for d in loaded.dishes) == ["Salad", "Soup"]
    assert dish.category.name == "Starters"


def test_every_relation_is_wired():
    for rel in RELATIONS:
        child = inspect(TENANT_MODELS[rel.child])
        assert child.has_property(rel.child_attr)
        if rel.parent_attr:
            parent = inspect(TENANT_MODELS[rel.parent])
            prop = parent.get_property(rel.parent_attr)
            assert prop.uselist is (rel.cardinality is Cardinality.ONE_TO_MANY)


def test_check_relations_rejects_mismatched_foreign_key():
    bad = (Relation(EntityKind.CATEGORY, EntityKind.DISH, "name", Cardinality.ONE_TO_MANY, "dishes", "category"),)
    with pytest.raises(SchemaError):
        SchemaRegistrar(relations=bad).check_relations()


def test_check_relations_requires_unique_column_for_one_to_one():
    bad = (Relation(EntityKind.USER, EntityKind.ORDER, "user_id", Cardinality.ONE_TO_ONE, "orders", "waiter"),)
    with pytest.raises(SchemaError):
        SchemaRegistrar(relations=bad).check_relations()


def test_schema_set_is_typed_by_entity_kind():
    schema = EntitySchemaSet.build("tenant_x")
    for kind, model in TENANT_MODELS.items():
        assert schema.model_for(kind) is model
