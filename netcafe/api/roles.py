"""
Role, module and permission grid endpoints (tenant scoped)
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import Dict, List
import structlog

from netcafe.core.dependencies import get_tenant_context, get_tenant_payload, get_tenant_session
from netcafe.core.permissions import Action, require_permission
from netcafe.schemas.rbac import (
    ModuleCreate,
    ModuleResponse,
    PermissionGrant,
    PermissionResponse,
    RoleCreate,
    RoleResponse,
)
from netcafe.tenancy.resolver import TenantContext

logger = structlog.get_logger(__name__)
router = APIRouter()


async def _commit_unique(session: AsyncSession, instance, conflict_detail: str):
    session.add(instance)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=conflict_detail)
    await session.refresh(instance)
    return instance


@router.post(
    "/roles",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("roles", Action.CREATE))],
)
async def create_role(
    role_data: RoleCreate,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    role = context.schema.role(**role_data.model_dump())
    return await _commit_unique(session, role, "Role already exists")


@router.post(
    "/modules",
    response_model=ModuleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("roles", Action.CREATE))],
)
async def create_module(
    module_data: ModuleCreate,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    module = context.schema.module(**module_data.model_dump())
    return await _commit_unique(session, module, "Module already exists")


@router.post(
    "/permissions",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("roles", Action.EDIT))],
)
async def grant_permission(
    grant: PermissionGrant,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    """Add a permission row for a role on a module"""
    schema = context.schema
    if await session.get(schema.role, grant.role_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role not found")
    module = await session.get(schema.module, grant.module_id)
    if module is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Module not found")

    permission = schema.permission(**grant.model_dump())
    permission = await _commit_unique(
        session,
        permission,
        "Permission already exists for this role and module",
    )
    logger.info(f"Permission granted: role {grant.role_id} on {module.name}")
    return PermissionResponse(**permission.model_dump(), module_name=module.name)


@router.get("/permissions/me", response_model=List[PermissionResponse])
async def my_permissions(
    payload: Dict = Depends(get_tenant_payload),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    """Permission grid of the caller's role"""
    Permission, Module = context.schema.permission, context.schema.module
    result = await session.exec(
        select(Permission, Module)
        .join(Module, Module.module_id == Permission.module_id)
        .where(Permission.role_id == payload.get("role_id"))
        .order_by(Module.name)
    )
    return [
        PermissionResponse(**permission.model_dump(), module_name=module.name)
        for permission, module in result.all()
    ]
