"""
RBAC over the per-tenant role x module permission grid
"""

from enum import Enum
from typing import Dict, Optional, Set
from fastapi import Depends
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from netcafe.core.dependencies import get_tenant_context, get_tenant_payload, get_tenant_session
from netcafe.core.exceptions import PermissionDenied
from netcafe.tenancy.resolver import TenantContext
from netcafe.tenancy.schema import EntitySchemaSet
from netcafe.tenancy.seed import DEFAULT_MODULES

__all__ = [
    "Action",
    "DEFAULT_MODULES",
    "load_permission_grid",
    "has_permission",
    "require_permission",
]


class Action(str, Enum):
    """Capability flags of a permission row"""
    CREATE = "create"
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"


PermissionGrid = Dict[str, Set[Action]]


async def load_permission_grid(
    session: AsyncSession,
    schema: EntitySchemaSet,
    role_id: Optional[int],
) -> PermissionGrid:
    """Module name -> allowed actions for a role"""
    if role_id is None:
        return {}

    Permission, Module = schema.permission, schema.module
    result = await session.exec(
        select(Permission, Module)
        .join(Module, Module.module_id == Permission.module_id)
        .where(Permission.role_id == role_id)
    )

    grid: PermissionGrid = {}
    for permission, module in result.all():
        allowed = grid.setdefault(module.name, set())
        for action in Action:
            if getattr(permission, f"can_{action.value}"):
                allowed.add(action)
    return grid


def has_permission(grid: PermissionGrid, module: str, action: Action) -> bool:
    """Check if the grid allows action on module"""
    return action in grid.get(module, set())


def require_permission(module: str, action: Action):
    """Dependency factory to check a module permission of the caller's role"""
    async def check_permission(
        payload: Dict = Depends(get_tenant_payload),
        context: TenantContext = Depends(get_tenant_context),
        session: AsyncSession = Depends(get_tenant_session),
    ) -> Dict:
        grid = await load_permission_grid(session, context.schema, payload.get("role_id"))
        if not has_permission(grid, module, action):
            raise PermissionDenied(module, action.value)
        return payload
    return check_permission
