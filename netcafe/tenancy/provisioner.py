"""
Tenant Provisioner

Onboards a new tenant:

1. derive the database name from the subdomain
2. insert the tenant record (unique constraints reject duplicates)
3. create the physical database
4. open it and register the tenant schema
5. seed the administrator

A failure in steps 3-5 leaves the record in place with is_provisioned off
and raises ProvisioningIncomplete; repair() re-runs those steps.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
import structlog

from netcafe.core.auth import hash_password
from netcafe.core.config import Settings
from netcafe.core.exceptions import NetCafeError, ProvisioningIncomplete
from netcafe.models.tenant_record import TenantRecord
from netcafe.schemas.tenant import TenantPublic
from netcafe.tenancy.connection import ConnectionFactory
from netcafe.tenancy.directory import SignupData, TenantDirectory
from netcafe.tenancy.schema import SchemaRegistrar
from netcafe.tenancy.seed import seed_tenant_database

logger = structlog.get_logger(__name__)

__all__ = ["SignupData", "TenantProvisioner"]


class TenantProvisioner:
    """Creates tenant records and the databases behind them"""

    def __init__(
        self,
        directory: TenantDirectory,
        connections: ConnectionFactory,
        registrar: SchemaRegistrar,
        settings: Settings,
    ):
        self.directory = directory
        self.connections = connections
        self.registrar = registrar
        self.settings = settings

    async def provision(self, signup: SignupData) -> TenantPublic:
        """
        Raises:
            InvalidSubdomain: subdomain unusable
            PlanNotFound: unknown plan
            DuplicateTenant: subdomain or email taken
            ProvisioningIncomplete: record stored but the tenant database is not usable
        """
        logger.info("Provisioning started", subdomain=signup.subdomain)
        record = await self.directory.create(signup, hash_password(signup.password))
        record = await self._complete(record, signup.admin_username)
        logger.info(
            "Provisioning completed",
            tenant_id=record.tenant_id,
            database_name=record.database_name,
        )
        return TenantPublic.model_validate(record)

    async def repair(self, tenant_id: int) -> TenantPublic:
        """Re-run database creation, schema registration and seeding for a record"""
        record = await self.directory.get(tenant_id)
        logger.info("Repairing tenant", tenant_id=tenant_id, database_name=record.database_name)
        record = await self._complete(record)
        return TenantPublic.model_validate(record)

    async def _complete(self, record: TenantRecord, admin_username: Optional[str] = None) -> TenantRecord:
        await self._build_tenant_database(record, admin_username)
        try:
            return await self.directory.mark_provisioned(record.tenant_id)
        except SQLAlchemyError as e:
            raise self._incomplete(record, "mark_provisioned", e) from e

    async def _build_tenant_database(self, record: TenantRecord, admin_username: Optional[str]) -> None:
        database_name = record.database_name
        stage = "create_database"
        try:
            await self.connections.create_database(database_name)

            stage = "open_connection"
            connection = await self.connections.open(database_name)
            try:
                stage = "register_schema"
                schema = await self.registrar.register(connection)

                stage = "seed_admin"
                async with connection.session() as session:
                    await seed_tenant_database(
                        session,
                        schema,
                        record,
                        admin_role=self.settings.DEFAULT_ADMIN_ROLE,
                        admin_username=admin_username,
                    )
            finally:
                await connection.dispose()
        except (NetCafeError, SQLAlchemyError) as e:
            raise self._incomplete(record, stage, e) from e

    def _incomplete(self, record: TenantRecord, stage: str, error: Exception) -> ProvisioningIncomplete:
        logger.error(
            "Provisioning incomplete",
            tenant_id=record.tenant_id,
            database_name=record.database_name,
            stage=stage,
            error=str(error),
        )
        return ProvisioningIncomplete(record.tenant_id, record.database_name, stage)
