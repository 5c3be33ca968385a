"""
Tenant Directory

Read and write access to the tenant records in the master database.
Lookups never return soft-deleted records.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel import select
import structlog

from netcafe.core.exceptions import (
    DuplicateTenant,
    PlanNotFound,
    TenantNotFound,
    TenantSuspended,
)
from netcafe.models.subscription import SubscriptionPlan
from netcafe.models.tenant_record import TenantRecord
from netcafe.tenancy.naming import database_name_for, normalize_subdomain

logger = structlog.get_logger(__name__)


@dataclass
class SignupData:
    """What a restaurant owner submits to create a tenant"""

    restaurant_name: str
    subdomain: str
    email: str
    password: str
    plan_id: Optional[int] = None
    admin_username: Optional[str] = None


class TenantDirectory:
    """Tenant records in the master database"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def _find_one(self, *criteria) -> Optional[TenantRecord]:
        async with self.session_factory() as session:
            stmt = select(TenantRecord).where(*criteria, TenantRecord.deleted_at.is_(None))
            result = await session.exec(stmt)
            return result.first()

    async def find_by_email(self, email: str) -> Optional[TenantRecord]:
        return await self._find_one(TenantRecord.email == email.strip().lower())

    async def find_by_subdomain(self, subdomain: str) -> Optional[TenantRecord]:
        return await self._find_one(TenantRecord.subdomain == subdomain.strip().lower())

    async def find(self, key: str) -> Optional[TenantRecord]:
        """Look up by email if key looks like one, otherwise by subdomain"""
        if "@" in key:
            return await self.find_by_email(key)
        return await self.find_by_subdomain(key)

    async def get(self, tenant_id: int) -> TenantRecord:
        async with self.session_factory() as session:
            record = await session.get(TenantRecord, tenant_id)
        if record is None or record.deleted_at is not None:
            raise TenantNotFound(str(tenant_id))
        return record

    async def require_active(self, key: str) -> TenantRecord:
        """
        Look up a tenant that may be served.

        Raises:
            TenantNotFound: no record for key
            TenantSuspended: record exists but is inactive
        """
        record = await self.find(key)
        if record is None:
            raise TenantNotFound(key)
        if not record.is_active:
            raise TenantSuspended(key)
        return record

    async def create(self, signup: SignupData, password_hash: str) -> TenantRecord:
        """
        Insert a tenant record for signup.

        Uniqueness of subdomain, email and database name is enforced by the
        master database constraints, so two concurrent signups for the same
        subdomain cannot both succeed.

        Raises:
            InvalidSubdomain: subdomain unusable as a routing key
            PlanNotFound: plan_id given but unknown or inactive
            DuplicateTenant: subdomain or email already registered
        """
        subdomain = normalize_subdomain(signup.subdomain)
        email = signup.email.strip().lower()
        record = TenantRecord(
            restaurant_name=signup.restaurant_name,
            subdomain=subdomain,
            email=email,
            password_hash=password_hash,
            database_name=database_name_for(subdomain),
            plan_id=signup.plan_id,
        )

        async with self.session_factory() as session:
            if signup.plan_id is not None:
                await self._require_plan(session, signup.plan_id)

            session.add(record)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                conflict = await self._conflicting_field(session, subdomain, email)
                if conflict is None and signup.plan_id is not None:
                    # Plan removed after the check above
                    raise PlanNotFound(signup.plan_id)
                field, value = conflict or ("subdomain", subdomain)
                logger.warning("Duplicate tenant signup", field=field, value=value)
                raise DuplicateTenant(field, value)
            await session.refresh(record)

        logger.info(
            "Tenant record created",
            tenant_id=record.tenant_id,
            subdomain=record.subdomain,
            database_name=record.database_name,
        )
        return record

    async def _require_plan(self, session, plan_id: int) -> SubscriptionPlan:
        plan = await session.get(SubscriptionPlan, plan_id)
        if plan is None or not plan.is_active:
            raise PlanNotFound(plan_id)
        return plan

    async def _conflicting_field(
        self, session, subdomain: str, email: str
    ) -> Optional[tuple[str, str]]:
        # Soft-deleted rows still hold their unique values
        result = await session.exec(select(TenantRecord).where(TenantRecord.subdomain == subdomain))
        if result.first() is not None:
            return "subdomain", subdomain
        result = await session.exec(select(TenantRecord).where(TenantRecord.email == email))
        if result.first() is not None:
            return "email", email
        return None

    async def _update(self, tenant_id: int, **values) -> TenantRecord:
        async with self.session_factory() as session:
            record = await session.get(TenantRecord, tenant_id)
            if record is None or record.deleted_at is not None:
                raise TenantNotFound(str(tenant_id))
            for key, value in values.items():
                setattr(record, key, value)
            record.updated_at = datetime.utcnow()
            session.add(record)
            await session.commit()
            await session.refresh(record)
            return record

    async def mark_provisioned(self, tenant_id: int) -> TenantRecord:
        return await self._update(tenant_id, is_provisioned=True)

    async def set_active(self, tenant_id: int, is_active: bool) -> TenantRecord:
        record = await self._update(tenant_id, is_active=is_active)
        logger.info(f"Tenant {'activated' if is_active else 'suspended'}: {tenant_id}")
        return record

    async def change_plan(self, tenant_id: int, plan_id: int) -> TenantRecord:
        """
        Move a tenant to another active plan.

        Raises:
            TenantNotFound: unknown or deleted tenant
            PlanNotFound: plan unknown, inactive or deleted concurrently
        """
        async with self.session_factory() as session:
            await self._require_plan(session, plan_id)
            record = await session.get(TenantRecord, tenant_id)
            if record is None or record.deleted_at is not None:
                raise TenantNotFound(str(tenant_id))
            record.plan_id = plan_id
            record.updated_at = datetime.utcnow()
            session.add(record)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise PlanNotFound(plan_id)
            await session.refresh(record)
        logger.info(f"Tenant {tenant_id} moved to plan {plan_id}")
        return record

    async def set_payment_status(self, tenant_id: int, is_payment_done: bool) -> TenantRecord:
        return await self._update(tenant_id, is_payment_done=is_payment_done)

    async def soft_delete(self, tenant_id: int) -> TenantRecord:
        record = await self._update(tenant_id, deleted_at=datetime.utcnow(), is_active=False)
        logger.info(f"Tenant soft-deleted: {tenant_id}")
        return record

    async def list_unprovisioned(self) -> list[TenantRecord]:
        async with self.session_factory() as session:
            stmt = (
                select(TenantRecord)
                .where(TenantRecord.is_provisioned == False)  # noqa: E712
                .where(TenantRecord.deleted_at.is_(None))
                .order_by(TenantRecord.tenant_id)
            )
            result = await session.exec(stmt)
            return list(result.all())
