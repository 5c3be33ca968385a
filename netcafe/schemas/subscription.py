"""
Pydantic schemas for subscription plans
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from netcafe.models.subscription import PlanName
from netcafe.schemas.tenant import TenantPublic


class PlanCreate(BaseModel):
    name: PlanName
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None
    max_users: int = Field(..., ge=1)
    is_active: bool = True


class PlanUpdate(BaseModel):
    name: Optional[PlanName] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None
    max_users: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None


class PlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: PlanName
    price: Decimal
    description: Optional[str]
    max_users: int
    is_active: bool
    created_at: datetime


class PlanWithTenants(PlanResponse):
    """Plan with the tenants subscribed to it"""
    tenants: List[TenantPublic] = []
