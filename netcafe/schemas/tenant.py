"""
Pydantic schemas for signup and the tenant directory
"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
from datetime import date, datetime


class SignupRequest(BaseModel):
    """Restaurant owner signup"""
    restaurant_name: str = Field(..., min_length=1, max_length=100)
    subdomain: str = Field(..., min_length=1, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=100)
    plan_id: Optional[int] = None
    admin_username: Optional[str] = Field(default=None, max_length=100)


class MasterLoginRequest(BaseModel):
    """Tenant owner login against the master directory"""
    email: EmailStr
    password: str


class TenantPublic(BaseModel):
    """Tenant record without secret fields"""
    model_config = ConfigDict(from_attributes=True)

    tenant_id: int
    restaurant_name: str
    subdomain: str
    email: str
    database_name: str
    plan_id: Optional[int]
    end_date: Optional[date]
    is_payment_done: bool
    is_active: bool
    is_provisioned: bool
    is_first_login: bool
    created_at: datetime
    updated_at: Optional[datetime]


class PlanChangeRequest(BaseModel):
    plan_id: int


class PaymentStatusRequest(BaseModel):
    is_payment_done: bool
