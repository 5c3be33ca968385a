"""
Order, order item, billing and feedback models
"""

from sqlmodel import Field, SQLModel
from decimal import Decimal
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid


class OrderStatus(str, Enum):
    OPEN = "open"
    SERVED = "served"
    PAID = "paid"
    CANCELLED = "cancelled"


class OrderItemStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    WALLET = "wallet"
    OTHER = "other"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Order(SQLModel, table=True):
    """Order taken by a waiter"""

    __tablename__ = "orders"

    order_id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.user_id", index=True, description="Waiter")
    table_number: Optional[str] = Field(default=None, max_length=20)
    status: OrderStatus = Field(default=OrderStatus.OPEN, index=True)
    total_amount: Decimal = Field(default=Decimal("0.00"), max_digits=10, decimal_places=2)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class OrderItem(SQLModel, table=True):
    """One dish line on an order"""

    __tablename__ = "order_items"

    order_item_id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.order_id", index=True)
    dish_id: int = Field(foreign_key="dishes.dish_id", index=True)

    item_name: str = Field(max_length=150, description="Dish name snapshot")
    quantity: int = Field(default=1)
    total_price: Decimal = Field(max_digits=10, decimal_places=2)
    special_request: Optional[str] = Field(default=None)
    status: OrderItemStatus = Field(default=OrderItemStatus.PENDING)


class Billing(SQLModel, table=True):
    """Invoice for exactly one order"""

    __tablename__ = "billing"

    billing_id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.order_id", unique=True)
    invoice_number: uuid.UUID = Field(default_factory=uuid.uuid4, unique=True)

    total_amount: Decimal = Field(max_digits=10, decimal_places=2)
    payment_method: PaymentMethod = Field(nullable=False)
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)

    created_at: datetime = Field(default_factory=datetime.utcnow)


class Feedback(SQLModel, table=True):
    """Guest feedback for exactly one order"""

    __tablename__ = "feedback"

    feedback_id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.order_id", unique=True)

    customer_name: Optional[str] = Field(default=None, max_length=100)
    customer_email: Optional[str] = Field(default=None, max_length=255)
    rating: int = Field(description="1-5")
    food_rating: Optional[int] = None
    service_rating: Optional[int] = None
    comment: Optional[str] = None
    is_public: bool = Field(default=True, description="Whether to display on website")

    created_at: datetime = Field(default_factory=datetime.utcnow)
