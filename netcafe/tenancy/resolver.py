"""
Tenant Connection Resolver

The hot path of every tenant-scoped request: tenant identity key to a ready
per-tenant connection and entity schema.
"""

from dataclasses import dataclass

import structlog
from sqlmodel.ext.asyncio.session import AsyncSession

from netcafe.core.exceptions import (
    ProvisioningIncomplete,
    SchemaError,
    TenantNotFound,
    TenantSuspended,
)
from netcafe.models.tenant_record import TenantRecord
from netcafe.tenancy.connection import ConnectionFactory, DatabaseConnection
from netcafe.tenancy.directory import TenantDirectory
from netcafe.tenancy.registry import TenantConnectionHandle, TenantConnectionRegistry
from netcafe.tenancy.schema import EntitySchemaSet, SchemaRegistrar

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant: its directory record and its cached handle"""

    tenant: TenantRecord
    handle: TenantConnectionHandle

    @property
    def connection(self) -> DatabaseConnection:
        return self.handle.connection

    @property
    def schema(self) -> EntitySchemaSet:
        return self.handle.schema

    @property
    def database_name(self) -> str:
        return self.handle.database_name

    def session(self) -> AsyncSession:
        return self.handle.connection.session()


class TenantConnectionResolver:
    """Resolves a tenant identity key (email or subdomain) to a TenantContext"""

    def __init__(
        self,
        directory: TenantDirectory,
        connections: ConnectionFactory,
        registrar: SchemaRegistrar,
        registry: TenantConnectionRegistry,
    ):
        self.directory = directory
        self.connections = connections
        self.registrar = registrar
        self.registry = registry

    async def resolve(self, key: str) -> TenantContext:
        """
        Raises:
            TenantNotFound: no live record for key
            TenantSuspended: record is inactive
            ProvisioningIncomplete: record exists but its database was never completed
            DatabaseConnectionError: tenant database unreachable
            SchemaError: schema registration failed
        """
        record = await self.directory.find(key)
        if record is None:
            logger.warning("Tenant not found", key=key)
            raise TenantNotFound(key)
        if not record.is_active:
            logger.warning("Tenant suspended", key=key, tenant_id=record.tenant_id)
            raise TenantSuspended(key)
        if not record.is_provisioned:
            logger.warning("Tenant not provisioned", key=key, tenant_id=record.tenant_id)
            raise ProvisioningIncomplete(record.tenant_id, record.database_name, "resolve")

        handle = await self.registry.get_or_create(record.database_name, self._connect)
        return TenantContext(tenant=record, handle=handle)

    async def _connect(self, database_name: str) -> TenantConnectionHandle:
        connection = await self.connections.open(database_name)
        try:
            schema = await self.registrar.register(connection)
        except SchemaError:
            await connection.dispose()
            raise
        return TenantConnectionHandle(connection=connection, schema=schema)
