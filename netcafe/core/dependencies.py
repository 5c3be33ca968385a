"""
Authentication and tenant resolution dependencies for FastAPI
"""

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import AsyncIterator, Dict, TYPE_CHECKING
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from netcafe.core.auth import TENANT_SCOPE, decode_access_token
from netcafe.tenancy.resolver import TenantContext

if TYPE_CHECKING:
    from netcafe.tenancy.runtime import TenancyRuntime

logger = structlog.get_logger(__name__)
security = HTTPBearer()


def get_runtime(request: Request) -> "TenancyRuntime":
    """Tenancy runtime built by create_app()"""
    return request.app.state.runtime


async def get_token_payload(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict:
    """Decoded JWT claims of the caller"""
    payload = decode_access_token(credentials.credentials, get_runtime(request).settings)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


async def get_tenant_payload(payload: Dict = Depends(get_token_payload)) -> Dict:
    """Claims of a tenant-scoped token"""
    if payload.get("scope") != TENANT_SCOPE or not payload.get("tenant"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tenant token required",
        )
    return payload


async def get_tenant_context(
    payload: Dict = Depends(get_tenant_payload),
    runtime: "TenancyRuntime" = Depends(get_runtime),
) -> TenantContext:
    """Resolve the caller's tenant database before the handler runs"""
    context = await runtime.resolver.resolve(payload["tenant"])
    logger.debug(f"Tenant resolved: {context.database_name}")
    return context


async def get_tenant_session(
    context: TenantContext = Depends(get_tenant_context),
) -> AsyncIterator[AsyncSession]:
    """Session on the caller's tenant database"""
    async with context.session() as session:
        yield session


def get_current_user_id(payload: Dict = Depends(get_tenant_payload)) -> int:
    return int(payload["sub"])


def verify_admin_key(
    request: Request,
    x_admin_key: str = Header(...),
) -> None:
    """Verify the platform admin key from the X-Admin-Key header"""
    if x_admin_key != get_runtime(request).settings.PLATFORM_ADMIN_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin API key",
        )
