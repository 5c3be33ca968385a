"""
Pydantic schemas for tenant users
"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
from datetime import datetime


class TenantLoginRequest(BaseModel):
    """
    Staff login. The tenant is looked up by subdomain when given, otherwise
    by the email (which then must be the owner's).
    """
    email: EmailStr
    password: str
    subdomain: Optional[str] = None


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    role_id: int


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    username: str
    email: str
    role_id: int
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime]
