"""
Schema Registrar

Declares the tenant entity tables inside one tenant database and returns
them as a typed EntitySchemaSet. Registration is a non-destructive sync:
missing tables are created, existing tables are left untouched.
"""

from dataclasses import dataclass, fields

from sqlalchemy import Table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import configure_mappers
import structlog

from netcafe.core.exceptions import SchemaError
from netcafe.models.tenant import (
    TENANT_MODELS,
    RELATIONS,
    Role,
    Module,
    Permission,
    User,
    Category,
    Dish,
    Order,
    OrderItem,
    Billing,
    Feedback,
    Chat,
    Message,
)
from netcafe.models.tenant.relationships import Cardinality, Relation
from netcafe.tenancy.connection import DatabaseConnection
from netcafe.tenancy.entities import EntityKind

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EntitySchemaSet:
    """Entity models registered in one tenant database"""

    database_name: str
    role: type[Role]
    module: type[Module]
    permission: type[Permission]
    user: type[User]
    category: type[Category]
    dish: type[Dish]
    order: type[Order]
    order_item: type[OrderItem]
    billing: type[Billing]
    feedback: type[Feedback]
    chat: type[Chat]
    message: type[Message]

    @classmethod
    def build(cls, database_name: str) -> "EntitySchemaSet":
        return cls(
            database_name=database_name,
            **{kind.value: model for kind, model in TENANT_MODELS.items()},
        )

    def model_for(self, kind: EntityKind) -> type:
        return getattr(self, kind.value)

    @property
    def models(self) -> tuple[type, ...]:
        return tuple(
            getattr(self, f.name) for f in fields(self) if f.name != "database_name"
        )

    @property
    def tables(self) -> list[Table]:
        return [model.__table__ for model in self.models]


class SchemaRegistrar:
    """Creates and wires the tenant entity schema on a connection"""

    def __init__(self, relations: tuple[Relation, ...] = RELATIONS):
        self.relations = relations
        self._relations_checked = False

    def check_relations(self) -> None:
        """
        Verify every declared relation joins a child foreign key to its
        parent's primary key and that all mappers configure.

        Raises:
            SchemaError: relation table and models disagree
        """
        if self._relations_checked:
            return
        for rel in self.relations:
            parent = TENANT_MODELS[rel.parent].__table__
            child = TENANT_MODELS[rel.child].__table__
            column = child.c.get(rel.foreign_key)
            if column is None:
                raise SchemaError(f"{child.name}.{rel.foreign_key} does not exist")
            targets = {fk.column for fk in column.foreign_keys}
            if not targets or not targets <= set(parent.primary_key.columns):
                raise SchemaError(
                    f"{child.name}.{rel.foreign_key} does not reference {parent.name}"
                )
            if rel.cardinality is Cardinality.ONE_TO_ONE and not column.unique:
                raise SchemaError(f"{child.name}.{rel.foreign_key} must be unique for 1-1")
        try:
            configure_mappers()
        except SQLAlchemyError as e:
            raise SchemaError(str(e)) from e
        self._relations_checked = True

    async def register(self, connection: DatabaseConnection) -> EntitySchemaSet:
        """
        Sync the tenant tables into connection's database.

        Raises:
            SchemaError: the engine rejected a statement; nothing registered
                by this call should be treated as usable
        """
        self.check_relations()
        schema = EntitySchemaSet.build(connection.database_name)
        tables = schema.tables

        try:
            async with connection.engine.begin() as conn:
                await conn.run_sync(
                    lambda sync_conn: tables[0].metadata.create_all(
                        sync_conn, tables=tables, checkfirst=True
                    )
                )
        except SQLAlchemyError as e:
            logger.error(
                "Schema registration failed",
                database_name=connection.database_name,
                error=str(e),
            )
            raise SchemaError(str(e), database_name=connection.database_name) from e

        logger.info(
            "Schema registered",
            database_name=connection.database_name,
            table_count=len(tables),
        )
        return schema
