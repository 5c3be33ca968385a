"""
Per-tenant entity models

Each tenant database holds its own copy of these tables. Importing this
package wires the relationships declared in relationships.RELATIONS.
"""

from netcafe.tenancy.entities import EntityKind
from netcafe.models.tenant.role import Role, Module
from netcafe.models.tenant.permission import Permission
from netcafe.models.tenant.user import User
from netcafe.models.tenant.menu import Category, Dish
from netcafe.models.tenant.order import (
    Order,
    OrderStatus,
    OrderItem,
    OrderItemStatus,
    Billing,
    PaymentMethod,
    PaymentStatus,
    Feedback,
)
from netcafe.models.tenant.chat import Chat, Message
from netcafe.models.tenant.relationships import (
    Cardinality,
    Relation,
    RELATIONS,
    wire_relationships,
)

TENANT_MODELS: dict[EntityKind, type] = {
    EntityKind.ROLE: Role,
    EntityKind.MODULE: Module,
    EntityKind.PERMISSION: Permission,
    EntityKind.USER: User,
    EntityKind.CATEGORY: Category,
    EntityKind.DISH: Dish,
    EntityKind.ORDER: Order,
    EntityKind.ORDER_ITEM: OrderItem,
    EntityKind.BILLING: Billing,
    EntityKind.FEEDBACK: Feedback,
    EntityKind.CHAT: Chat,
    EntityKind.MESSAGE: Message,
}

wire_relationships(TENANT_MODELS)
