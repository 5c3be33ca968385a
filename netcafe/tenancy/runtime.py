"""
Composition root of the tenancy layer

One TenancyRuntime is built per application. It owns the master engine and
the tenant connection registry, both released by aclose() at shutdown.
"""

import structlog

from netcafe.core.config import Settings
from netcafe.core.database import create_master_engine, create_session_maker
from netcafe.services.subscriptions import SubscriptionService
from netcafe.tenancy.connection import ConnectionFactory
from netcafe.tenancy.directory import TenantDirectory
from netcafe.tenancy.provisioner import TenantProvisioner
from netcafe.tenancy.registry import TenantConnectionRegistry
from netcafe.tenancy.resolver import TenantConnectionResolver
from netcafe.tenancy.schema import SchemaRegistrar

logger = structlog.get_logger(__name__)


class TenancyRuntime:
    """Wires the master database, directory, provisioner and resolver together"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.master_engine = create_master_engine(settings)
        self.master_sessions = create_session_maker(self.master_engine)

        self.connections = ConnectionFactory(settings)
        self.registrar = SchemaRegistrar()
        self.registry = TenantConnectionRegistry()
        self.directory = TenantDirectory(self.master_sessions)
        self.provisioner = TenantProvisioner(
            self.directory,
            self.connections,
            self.registrar,
            settings,
        )
        self.resolver = TenantConnectionResolver(
            self.directory,
            self.connections,
            self.registrar,
            self.registry,
        )
        self.subscriptions = SubscriptionService(self.master_sessions)

    async def aclose(self) -> None:
        await self.registry.close()
        await self.master_engine.dispose()
        logger.info("Tenancy runtime closed")
