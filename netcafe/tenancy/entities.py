"""
Entity kinds of a tenant database
"""

from enum import Enum


class EntityKind(str, Enum):
    """Tag for every entity schema registered in a tenant database"""
    ROLE = "role"
    MODULE = "module"
    PERMISSION = "permission"
    USER = "user"
    CATEGORY = "category"
    DISH = "dish"
    ORDER = "order"
    ORDER_ITEM = "order_item"
    BILLING = "billing"
    FEEDBACK = "feedback"
    CHAT = "chat"
    MESSAGE = "message"
