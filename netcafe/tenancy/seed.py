"""
Initial rows of a freshly provisioned tenant database

Every step looks before it inserts, so seeding can be re-run against a
partly seeded database.
"""

from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from netcafe.models.tenant_record import TenantRecord
from netcafe.tenancy.schema import EntitySchemaSet

logger = structlog.get_logger(__name__)

DEFAULT_MODULES: tuple[str, ...] = (
    "categories",
    "dishes",
    "orders",
    "billing",
    "feedback",
    "users",
    "roles",
    "chat",
)


async def _get_or_add(session: AsyncSession, model, lookup: dict, **values):
    stmt = select(model)
    for column, value in lookup.items():
        stmt = stmt.where(getattr(model, column) == value)
    existing = (await session.exec(stmt)).first()
    if existing is not None:
        return existing, False
    instance = model(**lookup, **values)
    session.add(instance)
    await session.flush()
    return instance, True


async def seed_tenant_database(
    session: AsyncSession,
    schema: EntitySchemaSet,
    record: TenantRecord,
    admin_role: str,
    admin_username: Optional[str] = None,
):
    """
    Create the admin role, the default modules, a full permission row for
    the admin role on every module, and the single administrator user.

    Returns the administrator user.
    """
    role, _ = await _get_or_add(
        session,
        schema.role,
        {"name": admin_role},
        description="Full access to every module",
    )

    for module_name in DEFAULT_MODULES:
        module, _ = await _get_or_add(session, schema.module, {"name": module_name})
        await _get_or_add(
            session,
            schema.permission,
            {"role_id": role.role_id, "module_id": module.module_id},
            can_create=True,
            can_view=True,
            can_edit=True,
            can_delete=True,
        )

    admin, created = await _get_or_add(
        session,
        schema.user,
        {"email": record.email},
        username=admin_username or record.restaurant_name,
        password_hash=record.password_hash,
        role_id=role.role_id,
    )
    await session.commit()

    if created:
        logger.info("Tenant administrator seeded", database_name=schema.database_name, email=record.email)
    return admin
