"""
Schemas module
"""

from netcafe.schemas.token import TokenResponse
from netcafe.schemas.tenant import (
    SignupRequest,
    MasterLoginRequest,
    TenantPublic,
    PlanChangeRequest,
    PaymentStatusRequest,
)
from netcafe.schemas.subscription import PlanCreate, PlanUpdate, PlanResponse, PlanWithTenants
from netcafe.schemas.user import TenantLoginRequest, UserCreate, UserResponse
from netcafe.schemas.menu import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryWithDishes,
    DishCreate,
    DishUpdate,
    DishResponse,
)
from netcafe.schemas.rbac import (
    RoleCreate,
    RoleResponse,
    ModuleCreate,
    ModuleResponse,
    PermissionGrant,
    PermissionResponse,
)
from netcafe.schemas.chat import MessageCreate, MessageResponse

__all__ = [
    "TokenResponse",
    "SignupRequest",
    "MasterLoginRequest",
    "TenantPublic",
    "PlanChangeRequest",
    "PaymentStatusRequest",
    "PlanCreate",
    "PlanUpdate",
    "PlanResponse",
    "PlanWithTenants",
    "TenantLoginRequest",
    "UserCreate",
    "UserResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryWithDishes",
    "DishCreate",
    "DishUpdate",
    "DishResponse",
    "RoleCreate",
    "RoleResponse",
    "ModuleCreate",
    "ModuleResponse",
    "PermissionGrant",
    "PermissionResponse",
    "MessageCreate",
    "MessageResponse",
]
