"""
Subscription plan model (master database)
"""

from sqlmodel import Field, SQLModel, Relationship
from decimal import Decimal
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from enum import Enum

if TYPE_CHECKING:
    from netcafe.models.tenant_record import TenantRecord


class PlanName(str, Enum):
    """Fixed set of plan tiers"""
    BASIC = "Basic"
    STANDARD = "Standard"
    PREMIUM = "Premium"


class SubscriptionPlan(SQLModel, table=True):
    """Plan a tenant subscribes to; never deleted while referenced"""

    __tablename__ = "subscription_plans"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: PlanName = Field(unique=True, index=True, description="Plan tier")
    price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Monthly price",
    )
    description: Optional[str] = Field(default=None, max_length=255)
    max_users: int = Field(default=1, description="Maximum tenant users on this plan")
    is_active: bool = Field(default=True, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    # Relationships
    # The database enforces RESTRICT; the ORM never nulls tenant plan_id
    tenants: list["TenantRecord"] = Relationship(
        back_populates="plan",
        sa_relationship_kwargs={"passive_deletes": "all"},
    )
