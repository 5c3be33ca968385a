"""
Role and module models for the per-tenant permission grid
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional


class Role(SQLModel, table=True):
    """Named role users are assigned to"""

    __tablename__ = "roles"

    role_id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, unique=True, nullable=False)
    description: Optional[str] = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class Module(SQLModel, table=True):
    """Feature area permissions are scoped to (categories, dishes, orders...)"""

    __tablename__ = "modules"

    module_id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, unique=True, nullable=False)
    description: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)
