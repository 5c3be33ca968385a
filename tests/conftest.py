"""
Test configuration for pytest

Every test gets its own master SQLite file and tenant directory under
tmp_path, so provisioning and resolution run end to end without a server.
"""

import os

# Test environment variables
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["PLATFORM_ADMIN_KEY"] = "test-admin-key"

import pytest
import pytest_asyncio
from decimal import Decimal
from httpx import ASGITransport, AsyncClient

from netcafe.core.config import Settings
from netcafe.core.database import init_master_db
from netcafe.models.subscription import PlanName
from netcafe.schemas.subscription import PlanCreate
from netcafe.tenancy.runtime import TenancyRuntime
from tests.factories import make_signup


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'master.db'}",
        TENANT_SQLITE_DIR=str(tmp_path / "tenants"),
        JWT_SECRET_KEY="app-jwt-secret",
        PLATFORM_ADMIN_KEY="test-admin-key",
    )


@pytest_asyncio.fixture
async def runtime(settings):
    """Tenancy runtime with the master schema created"""
    runtime = TenancyRuntime(settings)
    await init_master_db(runtime.master_engine)
    yield runtime
    await runtime.aclose()


@pytest_asyncio.fixture
async def plan(runtime):
    return await runtime.subscriptions.create(
        PlanCreate(name=PlanName.BASIC, price=Decimal("19.99"), max_users=5)
    )


@pytest_asyncio.fixture
async def acme(runtime):
    """Provisioned tenant 'acme'"""
    return await runtime.provisioner.provision(make_signup())


@pytest_asyncio.fixture
async def app(settings):
    from netcafe.main import create_app

    app = create_app(settings)
    await init_master_db(app.state.runtime.master_engine)
    yield app
    await app.state.runtime.aclose()


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
