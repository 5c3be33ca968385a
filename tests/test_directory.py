"""
Tests for the Tenant Directory
"""

import pytest

from netcafe.core.auth import hash_password
from netcafe.core.exceptions import (
    DuplicateTenant,
    InvalidSubdomain,
    PlanNotFound,
    TenantNotFound,
    TenantSuspended,
)
from netcafe.schemas.subscription import PlanUpdate
from netcafe.tenancy.directory import TenantDirectory
from tests.factories import make_signup


class UncheckedPlanDirectory(TenantDirectory):
    """Skips the plan lookup, as if the plan vanished right after it"""

    async def _require_plan(self, session, plan_id):
        return None


@pytest.mark.asyncio
async def test_create_computes_database_name(runtime):
    record = await runtime.directory.create(make_signup(subdomain="Acme", email="A@Acme.com"), "hash")

    assert record.subdomain == "acme"
    assert record.email == "a@acme.com"
    assert record.database_name == "tenant_mfrw2zi"
    assert record.is_active
    assert not record.is_provisioned


@pytest.mark.asyncio
async def test_lookups(runtime):
    record = await runtime.directory.create(make_signup(), "hash")

    assert (await runtime.directory.find_by_email("A@ACME.COM")).tenant_id == record.tenant_id
    assert (await runtime.directory.find_by_subdomain("acme")).tenant_id == record.tenant_id
    assert (await runtime.directory.find("a@acme.com")).tenant_id == record.tenant_id
    assert (await runtime.directory.find("acme")).tenant_id == record.tenant_id
    assert await runtime.directory.find("nobody") is None
    assert await runtime.directory.find_by_email("nobody@acme.com") is None


@pytest.mark.asyncio
async def test_duplicate_subdomain_and_email(runtime):
    await runtime.directory.create(make_signup(), "hash")

    with pytest.raises(DuplicateTenant) as exc_info:
        await runtime.directory.create(make_signup(email="other@acme.com"), "hash")
    assert exc_info.value.field == "subdomain"

    with pytest.raises(DuplicateTenant) as exc_info:
        await runtime.directory.create(make_signup(subdomain="acme2"), "hash")
    assert exc_info.value.field == "email"


@pytest.mark.asyncio
async def test_invalid_subdomain_and_unknown_plan(runtime):
    with pytest.raises(InvalidSubdomain):
        await runtime.directory.create(make_signup(subdomain="no spaces"), "hash")
    with pytest.raises(PlanNotFound):
        await runtime.directory.create(make_signup(plan_id=999), "hash")


@pytest.mark.asyncio
async def test_suspended_is_distinct_from_not_found(runtime):
    record = await runtime.directory.create(make_signup(), "hash")
    await runtime.directory.set_active(record.tenant_id, False)

    with pytest.raises(TenantSuspended):
        await runtime.directory.require_active("acme")
    with pytest.raises(TenantNotFound):
        await runtime.directory.require_active("ghost")

    await runtime.directory.set_active(record.tenant_id, True)
    assert (await runtime.directory.require_active("a@acme.com")).is_active


@pytest.mark.asyncio
async def test_soft_deleted_records_are_hidden_but_keep_their_subdomain(runtime):
    record = await runtime.directory.create(make_signup(), hash_password("x"))
    await runtime.directory.soft_delete(record.tenant_id)

    assert await runtime.directory.find("acme") is None
    with pytest.raises(TenantNotFound):
        await runtime.directory.get(record.tenant_id)
    with pytest.raises(DuplicateTenant):
        await runtime.directory.create(make_signup(email="new@acme.com"), "hash")


@pytest.mark.asyncio
async def test_admin_updates(runtime, plan):
    record = await runtime.directory.create(make_signup(), "hash")

    updated = await runtime.directory.change_plan(record.tenant_id, plan.id)
    assert updated.plan_id == plan.id
    with pytest.raises(PlanNotFound):
        await runtime.directory.change_plan(record.tenant_id, 12345)

    updated = await runtime.directory.set_payment_status(record.tenant_id, False)
    assert updated.is_payment_done is False

    assert [r.tenant_id for r in await runtime.directory.list_unprovisioned()] == [record.tenant_id]
    await runtime.directory.mark_provisioned(record.tenant_id)
    assert await runtime.directory.list_unprovisioned() == []


@pytest.mark.asyncio
async def test_inactive_plan_is_rejected(runtime, plan):
    record = await runtime.directory.create(make_signup(), "hash")
    await runtime.subscriptions.update(plan.id, PlanUpdate(is_active=False))

    with pytest.raises(PlanNotFound):
        await runtime.directory.create(make_signup(subdomain="other", email="o@other.com", plan_id=plan.id), "hash")
    with pytest.raises(PlanNotFound):
        await runtime.directory.change_plan(record.tenant_id, plan.id)
    assert (await runtime.directory.get(record.tenant_id)).plan_id is None


@pytest.mark.asyncio
async def test_plan_removed_mid_operation_is_plan_not_found(runtime):
    directory = UncheckedPlanDirectory(runtime.master_sessions)
    record = await directory.create(make_signup(), "hash")

    with pytest.raises(PlanNotFound):
        await directory.create(make_signup(subdomain="other", email="o@other.com", plan_id=999), "hash")
    with pytest.raises(PlanNotFound):
        await directory.change_plan(record.tenant_id, 999)
    assert await directory.find("other") is None
