"""
Master API endpoints: signup, owner login and tenant administration
"""

from fastapi import APIRouter, Depends, status
import structlog

from netcafe.core.auth import MASTER_SCOPE, create_access_token, verify_password
from netcafe.core.dependencies import get_runtime, verify_admin_key
from netcafe.core.exceptions import InvalidCredentials, TenantSuspended
from netcafe.schemas.tenant import (
    MasterLoginRequest,
    PaymentStatusRequest,
    PlanChangeRequest,
    SignupRequest,
    TenantPublic,
)
from netcafe.schemas.token import TokenResponse
from netcafe.tenancy.provisioner import SignupData
from netcafe.tenancy.runtime import TenancyRuntime

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/signup", response_model=TenantPublic, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: SignupRequest,
    runtime: TenancyRuntime = Depends(get_runtime),
):
    """Register a restaurant and provision its database"""
    return await runtime.provisioner.provision(SignupData(**signup_data.model_dump()))


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: MasterLoginRequest,
    runtime: TenancyRuntime = Depends(get_runtime),
):
    """Owner login against the master directory"""
    record = await runtime.directory.find_by_email(login_data.email)
    if record is None or not verify_password(login_data.password, record.password_hash):
        raise InvalidCredentials()

    if not record.is_active:
        raise TenantSuspended(record.email)

    logger.info(f"Tenant owner logged in: {record.tenant_id}")
    access_token = create_access_token(
        subject=str(record.tenant_id),
        email=record.email,
        tenant=record.subdomain,
        scope=MASTER_SCOPE,
        settings=runtime.settings,
    )
    return TokenResponse(access_token=access_token, scope=MASTER_SCOPE, tenant=record.subdomain)


@router.get(
    "/tenants/{tenant_id}",
    response_model=TenantPublic,
    dependencies=[Depends(verify_admin_key)],
)
async def get_tenant(tenant_id: int, runtime: TenancyRuntime = Depends(get_runtime)):
    """Get tenant by ID"""
    return TenantPublic.model_validate(await runtime.directory.get(tenant_id))


@router.post(
    "/tenants/{tenant_id}/suspend",
    response_model=TenantPublic,
    dependencies=[Depends(verify_admin_key)],
)
async def suspend_tenant(tenant_id: int, runtime: TenancyRuntime = Depends(get_runtime)):
    return TenantPublic.model_validate(await runtime.directory.set_active(tenant_id, False))


@router.post(
    "/tenants/{tenant_id}/activate",
    response_model=TenantPublic,
    dependencies=[Depends(verify_admin_key)],
)
async def activate_tenant(tenant_id: int, runtime: TenancyRuntime = Depends(get_runtime)):
    return TenantPublic.model_validate(await runtime.directory.set_active(tenant_id, True))


@router.put(
    "/tenants/{tenant_id}/plan",
    response_model=TenantPublic,
    dependencies=[Depends(verify_admin_key)],
)
async def change_tenant_plan(
    tenant_id: int,
    plan_change: PlanChangeRequest,
    runtime: TenancyRuntime = Depends(get_runtime),
):
    """Move a tenant to another subscription plan"""
    record = await runtime.directory.change_plan(tenant_id, plan_change.plan_id)
    return TenantPublic.model_validate(record)


@router.put(
    "/tenants/{tenant_id}/payment",
    response_model=TenantPublic,
    dependencies=[Depends(verify_admin_key)],
)
async def set_tenant_payment(
    tenant_id: int,
    payment: PaymentStatusRequest,
    runtime: TenancyRuntime = Depends(get_runtime),
):
    record = await runtime.directory.set_payment_status(tenant_id, payment.is_payment_done)
    return TenantPublic.model_validate(record)


@router.delete(
    "/tenants/{tenant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(verify_admin_key)],
)
async def delete_tenant(tenant_id: int, runtime: TenancyRuntime = Depends(get_runtime)):
    """Soft delete; the record and its database are kept"""
    await runtime.directory.soft_delete(tenant_id)


@router.post(
    "/tenants/{tenant_id}/repair",
    response_model=TenantPublic,
    dependencies=[Depends(verify_admin_key)],
)
async def repair_tenant(tenant_id: int, runtime: TenancyRuntime = Depends(get_runtime)):
    """Re-run database creation, schema registration and seeding"""
    return await runtime.provisioner.repair(tenant_id)
