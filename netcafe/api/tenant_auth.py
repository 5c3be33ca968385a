"""
Tenant user authentication and user management endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from datetime import datetime
import structlog

from netcafe.core.auth import TENANT_SCOPE, create_access_token, hash_password, verify_password
from netcafe.core.dependencies import get_runtime, get_tenant_context, get_tenant_session
from netcafe.core.exceptions import InvalidCredentials
from netcafe.core.permissions import Action, require_permission
from netcafe.schemas.token import TokenResponse
from netcafe.schemas.user import TenantLoginRequest, UserCreate, UserResponse
from netcafe.tenancy.resolver import TenantContext
from netcafe.tenancy.runtime import TenancyRuntime

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login_user(
    login_data: TenantLoginRequest,
    runtime: TenancyRuntime = Depends(get_runtime),
):
    """Login a tenant user"""
    context = await runtime.resolver.resolve(login_data.subdomain or login_data.email)
    User = context.schema.user
    email = login_data.email.lower()

    async with context.session() as session:
        user = (await session.exec(select(User).where(User.email == email))).first()

        if not user or not verify_password(login_data.password, user.password_hash):
            raise InvalidCredentials()

        # Check if user is active
        if not user.is_active or user.deleted_at is not None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is inactive",
            )

        # Update last login
        user.last_login_at = datetime.utcnow()
        session.add(user)
        await session.commit()

    logger.info(f"User logged in: {user.user_id} ({context.database_name})")

    access_token = create_access_token(
        subject=str(user.user_id),
        email=user.email,
        tenant=context.tenant.subdomain,
        scope=TENANT_SCOPE,
        role_id=user.role_id,
        settings=runtime.settings,
    )
    return TokenResponse(
        access_token=access_token,
        scope=TENANT_SCOPE,
        tenant=context.tenant.subdomain,
        user_id=user.user_id,
        role_id=user.role_id,
    )


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("users", Action.CREATE))],
)
async def create_user(
    user_data: UserCreate,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    """Create a user in the caller's tenant"""
    User, Role = context.schema.user, context.schema.role

    if await session.get(Role, user_data.role_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Role not found",
        )

    email = user_data.email.lower()
    existing_user = (await session.exec(select(User).where(User.email == email))).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    new_user = User(
        username=user_data.username,
        email=email,
        password_hash=hash_password(user_data.password),
        role_id=user_data.role_id,
    )
    session.add(new_user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )
    await session.refresh(new_user)

    logger.info(f"User created: {new_user.user_id} ({context.database_name})")
    return new_user
