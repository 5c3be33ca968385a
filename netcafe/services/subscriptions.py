"""
Subscription plan management (master database)
"""

from datetime import datetime
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel import select
import structlog

from netcafe.core.exceptions import DuplicatePlan, PlanInUse, PlanNotFound
from netcafe.models.subscription import SubscriptionPlan
from netcafe.models.tenant_record import TenantRecord
from netcafe.schemas.subscription import (
    PlanCreate,
    PlanResponse,
    PlanUpdate,
    PlanWithTenants,
)
from netcafe.schemas.tenant import TenantPublic

logger = structlog.get_logger(__name__)


class SubscriptionService:
    """CRUD over subscription plans"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def create(self, data: PlanCreate) -> SubscriptionPlan:
        plan = SubscriptionPlan(**data.model_dump())
        async with self.session_factory() as session:
            session.add(plan)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicatePlan(data.name.value)
            await session.refresh(plan)
        logger.info(f"Subscription plan created: {plan.name.value}")
        return plan

    async def update(self, plan_id: int, data: PlanUpdate) -> SubscriptionPlan:
        async with self.session_factory() as session:
            plan = await session.get(SubscriptionPlan, plan_id)
            if plan is None:
                raise PlanNotFound(plan_id)

            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(plan, key, value)
            plan.updated_at = datetime.utcnow()
            session.add(plan)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicatePlan(data.name.value if data.name else str(plan_id))
            await session.refresh(plan)
        logger.info(f"Subscription plan updated: {plan_id}")
        return plan

    async def get(self, plan_id: int) -> PlanWithTenants:
        """Plan with the live tenants subscribed to it"""
        async with self.session_factory() as session:
            plan = await session.get(SubscriptionPlan, plan_id)
            if plan is None:
                raise PlanNotFound(plan_id)
            result = await session.exec(
                select(TenantRecord)
                .where(TenantRecord.plan_id == plan_id)
                .where(TenantRecord.deleted_at.is_(None))
                .order_by(TenantRecord.tenant_id)
            )
            tenants = [TenantPublic.model_validate(t) for t in result.all()]

        # Built field by field; plan.tenants would lazy load outside the session
        return PlanWithTenants(
            **PlanResponse.model_validate(plan).model_dump(),
            tenants=tenants,
        )

    async def list(self, active_only: bool = False) -> List[SubscriptionPlan]:
        async with self.session_factory() as session:
            stmt = select(SubscriptionPlan).order_by(SubscriptionPlan.price)
            if active_only:
                stmt = stmt.where(SubscriptionPlan.is_active == True)  # noqa: E712
            result = await session.exec(stmt)
            return list(result.all())

    async def delete(self, plan_id: int) -> None:
        """
        Delete a plan no tenant record references.

        Soft-deleted tenants still count: their billing history points at
        the plan.

        Raises:
            PlanNotFound: unknown plan
            PlanInUse: at least one tenant record references the plan
        """
        async with self.session_factory() as session:
            plan = await session.get(SubscriptionPlan, plan_id)
            if plan is None:
                raise PlanNotFound(plan_id)

            tenant_count = await self._count_tenants(session, plan_id)
            if tenant_count:
                logger.warning("Plan deletion rejected", plan_id=plan_id, tenant_count=tenant_count)
                raise PlanInUse(plan_id, tenant_count)

            await session.delete(plan)
            try:
                await session.commit()
            except IntegrityError:
                # A tenant subscribed after the count above
                await session.rollback()
                tenant_count = await self._count_tenants(session, plan_id)
                logger.warning("Plan deletion rejected", plan_id=plan_id, tenant_count=tenant_count)
                raise PlanInUse(plan_id, tenant_count)
        logger.info(f"Subscription plan deleted: {plan_id}")

    async def _count_tenants(self, session, plan_id: int) -> int:
        result = await session.exec(
            select(func.count()).select_from(TenantRecord).where(TenantRecord.plan_id == plan_id)
        )
        return result.one()
