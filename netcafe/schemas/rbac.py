"""
Pydantic schemas for roles, modules and the permission grid
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_id: int
    name: str
    description: Optional[str]


class ModuleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class ModuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    module_id: int
    name: str
    description: Optional[str]


class PermissionGrant(BaseModel):
    role_id: int
    module_id: int
    can_create: bool = False
    can_view: bool = False
    can_edit: bool = False
    can_delete: bool = False


class PermissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    permission_id: int
    role_id: int
    module_id: int
    module_name: Optional[str] = None
    can_create: bool
    can_view: bool
    can_edit: bool
    can_delete: bool
