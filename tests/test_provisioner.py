"""
Tests for the Tenant Provisioner
"""

import asyncio
import os

import pytest
from sqlmodel import select

from netcafe.core.auth import verify_password
from netcafe.core.exceptions import DuplicateTenant, ProvisioningIncomplete, SchemaError
from netcafe.tenancy.provisioner import TenantProvisioner
from netcafe.tenancy.schema import EntitySchemaSet, SchemaRegistrar
from netcafe.tenancy.seed import DEFAULT_MODULES
from tests.factories import make_signup


class FailingRegistrar(SchemaRegistrar):
    async def register(self, connection):
        raise SchemaError("conflicting column type", database_name=connection.database_name)


async def _tenant_rows(runtime, database_name, model):
    connection = await runtime.connections.open(database_name)
    try:
        async with connection.session() as session:
            return list((await session.exec(select(model))).all())
    finally:
        await connection.dispose()


@pytest.mark.asyncio
async def test_signup_provisions_database_and_admin(runtime, settings):
    tenant = await runtime.provisioner.provision(make_signup())

    assert tenant.database_name == "tenant_mfrw2zi"
    assert tenant.is_provisioned
    assert not hasattr(tenant, "password_hash")
    assert os.path.exists(os.path.join(settings.TENANT_SQLITE_DIR, "tenant_mfrw2zi.db"))

    schema = EntitySchemaSet.build(tenant.database_name)
    users = await _tenant_rows(runtime, tenant.database_name, schema.user)
    assert len(users) == 1
    assert users[0].email == "a@acme.com"
    assert verify_password("x", users[0].password_hash)

    roles = await _tenant_rows(runtime, tenant.database_name, schema.role)
    assert [r.name for r in roles] == [settings.DEFAULT_ADMIN_ROLE]
    assert users[0].role_id == roles[0].role_id

    modules = await _tenant_rows(runtime, tenant.database_name, schema.module)
    assert {m.name for m in modules} == set(DEFAULT_MODULES)
    permissions = await _tenant_rows(runtime, tenant.database_name, schema.permission)
    assert len(permissions) == len(DEFAULT_MODULES)
    assert all(p.can_create and p.can_view and p.can_edit and p.can_delete for p in permissions)


@pytest.mark.asyncio
async def test_master_record_stores_a_salted_hash(runtime, acme):
    record = await runtime.directory.find("acme")
    assert record.password_hash != "x"
    assert verify_password("x", record.password_hash)


@pytest.mark.asyncio
async def test_concurrent_duplicate_signups(runtime, settings):
    results = await asyncio.gather(
        runtime.provisioner.provision(make_signup(email="one@acme.com")),
        runtime.provisioner.provision(make_signup(email="two@acme.com")),
        return_exceptions=True,
    )

    succeeded = [r for r in results if not isinstance(r, Exception)]
    failed = [r for r in results if isinstance(r, Exception)]
    assert len(succeeded) == 1
    assert len(failed) == 1
    assert isinstance(failed[0], DuplicateTenant)

    databases = [f for f in os.listdir(settings.TENANT_SQLITE_DIR) if f.endswith(".db")]
    assert databases == ["tenant_mfrw2zi.db"]
    assert await runtime.directory.list_unprovisioned() == []


@pytest.mark.asyncio
async def test_failure_after_insert_is_incomplete_and_repairable(runtime):
    failing = TenantProvisioner(
        runtime.directory,
        runtime.connections,
        FailingRegistrar(),
        runtime.settings,
    )

    with pytest.raises(ProvisioningIncomplete) as exc_info:
        await failing.provision(make_signup())
    error = exc_info.value
    assert error.stage == "register_schema"
    assert error.database_name == "tenant_mfrw2zi"
    assert isinstance(error.__cause__, SchemaError)

    orphans = await runtime.directory.list_unprovisioned()
    assert [o.tenant_id for o in orphans] == [error.tenant_id]

    # Resolution refuses the orphan until it is repaired
    with pytest.raises(ProvisioningIncomplete):
        await runtime.resolver.resolve("acme")

    repaired = await runtime.provisioner.repair(error.tenant_id)
    assert repaired.is_provisioned
    context = await runtime.resolver.resolve("acme")
    assert context.database_name == "tenant_mfrw2zi"


@pytest.mark.asyncio
async def test_repair_is_idempotent(runtime, acme):
    await runtime.provisioner.repair(acme.tenant_id)
    await runtime.provisioner.repair(acme.tenant_id)

    schema = EntitySchemaSet.build(acme.database_name)
    assert len(await _tenant_rows(runtime, acme.database_name, schema.user)) == 1
    assert len(await _tenant_rows(runtime, acme.database_name, schema.permission)) == len(DEFAULT_MODULES)


@pytest.mark.asyncio
async def test_repair_script_completes_orphans(runtime):
    from netcafe.core.auth import hash_password
    from scripts.repair_tenants import repair_unprovisioned

    assert await repair_unprovisioned(runtime) == {"processed": 0, "repaired": 0, "failed": 0}

    await runtime.directory.create(make_signup(), hash_password("x"))
    result = await repair_unprovisioned(runtime)

    assert result == {"processed": 1, "repaired": 1, "failed": 0}
    assert (await runtime.resolver.resolve("acme")).tenant.is_provisioned
