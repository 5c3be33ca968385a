"""
Tests for subscription plan management
"""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from netcafe.core.exceptions import DuplicatePlan, PlanInUse, PlanNotFound
from netcafe.models.subscription import PlanName
from netcafe.schemas.subscription import PlanCreate, PlanUpdate
from netcafe.services.subscriptions import SubscriptionService
from tests.factories import make_signup


class RacingSubscriptionService(SubscriptionService):
    """Reports no tenants on the first count, as if a signup landed right after it"""

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.counts = 0

    async def _count_tenants(self, session, plan_id):
        self.counts += 1
        if self.counts == 1:
            return 0
        return await super()._count_tenants(session, plan_id)


@pytest.mark.asyncio
async def test_delete_rejected_while_referenced(runtime, plan):
    await runtime.provisioner.provision(make_signup(plan_id=plan.id))

    with pytest.raises(PlanInUse) as exc_info:
        await runtime.subscriptions.delete(plan.id)
    assert exc_info.value.tenant_count == 1
    assert (await runtime.subscriptions.get(plan.id)).id == plan.id


@pytest.mark.asyncio
async def test_soft_deleted_tenants_still_block_deletion(runtime, plan):
    record = await runtime.directory.create(make_signup(plan_id=plan.id), "hash")
    await runtime.directory.soft_delete(record.tenant_id)

    with pytest.raises(PlanInUse):
        await runtime.subscriptions.delete(plan.id)


@pytest.mark.asyncio
async def test_delete_unreferenced_plan(runtime, plan):
    await runtime.subscriptions.delete(plan.id)

    with pytest.raises(PlanNotFound):
        await runtime.subscriptions.get(plan.id)
    with pytest.raises(PlanNotFound):
        await runtime.subscriptions.delete(plan.id)


@pytest.mark.asyncio
async def test_duplicate_plan_name(runtime, plan):
    with pytest.raises(DuplicatePlan):
        await runtime.subscriptions.create(
            PlanCreate(name=PlanName.BASIC, price=Decimal("9.99"), max_users=1)
        )


@pytest.mark.asyncio
async def test_get_lists_subscribed_tenants(runtime, plan):
    await runtime.provisioner.provision(make_signup(plan_id=plan.id))

    detail = await runtime.subscriptions.get(plan.id)
    assert [t.subdomain for t in detail.tenants] == ["acme"]


@pytest.mark.asyncio
async def test_update_and_list(runtime, plan):
    premium = await runtime.subscriptions.create(
        PlanCreate(name=PlanName.PREMIUM, price=Decimal("99.00"), max_users=50, is_active=False)
    )
    updated = await runtime.subscriptions.update(plan.id, PlanUpdate(price=Decimal("24.99")))
    assert updated.price == Decimal("24.99")
    assert updated.max_users == 5

    assert {p.id for p in await runtime.subscriptions.list()} == {plan.id, premium.id}
    assert [p.id for p in await runtime.subscriptions.list(active_only=True)] == [plan.id]

    with pytest.raises(PlanNotFound):
        await runtime.subscriptions.update(999, PlanUpdate(max_users=2))


def test_plan_validation():
    with pytest.raises(ValidationError):
        PlanCreate(name=PlanName.BASIC, price=Decimal("-1"), max_users=1)
    with pytest.raises(ValidationError):
        PlanCreate(name=PlanName.BASIC, price=Decimal("1"), max_users=0)
    with pytest.raises(ValidationError):
        PlanCreate(name="Gold", price=Decimal("1"), max_users=1)


@pytest.mark.asyncio
async def test_delete_racing_a_signup_is_plan_in_use(runtime, plan):
    await runtime.directory.create(make_signup(plan_id=plan.id), "hash")
    service = RacingSubscriptionService(runtime.master_sessions)

    with pytest.raises(PlanInUse) as exc_info:
        await service.delete(plan.id)
    assert exc_info.value.tenant_count == 1
    assert (await runtime.subscriptions.get(plan.id)).tenants[0].subdomain == "acme"
