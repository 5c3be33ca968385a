"""
Declarative relationship table for tenant entities

Every cross-entity relationship of a tenant database is listed once in
RELATIONS and wired onto the mapped classes by wire_relationships(). The
models themselves only declare foreign key columns.

Wired relationship attributes are for reading (eager loading with
selectinload); rows are linked by setting the foreign key column.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import relationship

from netcafe.tenancy.entities import EntityKind


class Cardinality(str, Enum):
    ONE_TO_ONE = "1-1"
    ONE_TO_MANY = "1-N"


@dataclass(frozen=True)
class Relation:
    """parent 1 -- N (or 1) child, joined on child.foreign_key -> parent primary key"""

    parent: EntityKind
    child: EntityKind
    foreign_key: str
    cardinality: Cardinality
    parent_attr: Optional[str]
    child_attr: str


RELATIONS: tuple[Relation, ...] = (
    Relation(EntityKind.ROLE, EntityKind.USER, "role_id", Cardinality.ONE_TO_MANY, "users", "role"),
    Relation(EntityKind.ROLE, EntityKind.PERMISSION, "role_id", Cardinality.ONE_TO_MANY, "permissions", "role"),
    Relation(EntityKind.MODULE, EntityKind.PERMISSION, "module_id", Cardinality.ONE_TO_MANY, "permissions", "module"),
    Relation(EntityKind.CATEGORY, EntityKind.DISH, "category_id", Cardinality.ONE_TO_MANY, "dishes", "category"),
    Relation(EntityKind.USER, EntityKind.ORDER, "user_id", Cardinality.ONE_TO_MANY, "orders", "waiter"),
    Relation(EntityKind.ORDER, EntityKind.ORDER_ITEM, "order_id", Cardinality.ONE_TO_MANY, "items", "order"),
    Relation(EntityKind.DISH, EntityKind.ORDER_ITEM, "dish_id", Cardinality.ONE_TO_MANY, "order_items", "dish"),
    Relation(EntityKind.ORDER, EntityKind.BILLING, "order_id", Cardinality.ONE_TO_ONE, "billing", "order"),
    Relation(EntityKind.ORDER, EntityKind.FEEDBACK, "order_id", Cardinality.ONE_TO_ONE, "feedback", "order"),
    Relation(EntityKind.CHAT, EntityKind.MESSAGE, "chat_id", Cardinality.ONE_TO_MANY, "messages", "chat"),
    Relation(EntityKind.USER, EntityKind.MESSAGE, "sender_id", Cardinality.ONE_TO_MANY, None, "sender"),
    # A chat references two users; only the chat side navigates.
    Relation(EntityKind.USER, EntityKind.CHAT, "low_user_id", Cardinality.ONE_TO_MANY, None, "low_user"),
    Relation(EntityKind.USER, EntityKind.CHAT, "high_user_id", Cardinality.ONE_TO_MANY, None, "high_user"),
)


def wire_relationships(
    models: Mapping[EntityKind, type],
    relations: tuple[Relation, ...] = RELATIONS,
) -> None:
    """Add a relationship() pair for every relation not yet present on the mappers"""
    for rel in relations:
        parent_cls = models[rel.parent]
        child_cls = models[rel.child]
        parent_mapper = inspect(parent_cls)
        child_mapper = inspect(child_cls)
        fk_column = child_cls.__table__.c[rel.foreign_key]

        if child_mapper.has_property(rel.child_attr):
            continue

        back = rel.parent_attr
        child_mapper.add_property(
            rel.child_attr,
            relationship(
                parent_cls,
                foreign_keys=[fk_column],
                back_populates=back,
                viewonly=back is None,
            ),
        )
        if back is not None:
            parent_mapper.add_property(
                back,
                relationship(
                    child_cls,
                    foreign_keys=[fk_column],
                    back_populates=rel.child_attr,
                    uselist=rel.cardinality is Cardinality.ONE_TO_MANY,
                ),
            )
