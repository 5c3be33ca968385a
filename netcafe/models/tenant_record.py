"""
Tenant directory record (master database)
"""

from sqlmodel import Field, SQLModel, Relationship
from datetime import date, datetime
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from netcafe.models.subscription import SubscriptionPlan


class TenantRecord(SQLModel, table=True):
    """One customer organization and the database that isolates it"""

    __tablename__ = "tenants"

    tenant_id: Optional[int] = Field(default=None, primary_key=True)
    restaurant_name: str = Field(max_length=100, nullable=False)
    subdomain: str = Field(
        max_length=30,
        unique=True,
        index=True,
        description="Globally unique routing key",
    )
    email: str = Field(max_length=255, unique=True, index=True, description="Admin email")
    password_hash: Optional[str] = Field(default=None, max_length=255)

    # Derived once from the subdomain at creation and never changed
    database_name: str = Field(max_length=63, unique=True, nullable=False)

    # Subscription
    plan_id: Optional[int] = Field(
        default=None,
        foreign_key="subscription_plans.id",
        ondelete="RESTRICT",
        index=True,
    )
    end_date: Optional[date] = Field(default=None, description="Subscription end date")
    is_payment_done: bool = Field(default=True)

    # Status
    is_active: bool = Field(default=True, index=True)
    is_provisioned: bool = Field(default=False, description="Tenant database created, registered and seeded")
    is_first_login: bool = Field(default=True)
    notified: bool = Field(default=False, description="Owner notified by mail")

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = Field(default=None, index=True)

    # Relationships
    plan: Optional["SubscriptionPlan"] = Relationship(back_populates="tenants")
