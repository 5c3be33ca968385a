"""
Menu category endpoints (tenant scoped)
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import List
from datetime import datetime
import structlog

from netcafe.core.dependencies import get_tenant_context, get_tenant_session
from netcafe.core.permissions import Action, require_permission
from netcafe.schemas.menu import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    CategoryWithDishes,
)
from netcafe.tenancy.resolver import TenantContext

logger = structlog.get_logger(__name__)
router = APIRouter()


def _with_live_dishes(context: TenantContext):
    Category, Dish = context.schema.category, context.schema.dish
    return selectinload(Category.dishes.and_(Dish.deleted_at.is_(None)))


async def _get_category(session: AsyncSession, context: TenantContext, category_id: int):
    Category = context.schema.category
    result = await session.exec(
        select(Category)
        .where(Category.category_id == category_id, Category.deleted_at.is_(None))
        .options(_with_live_dishes(context))
    )
    category = result.first()
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return category


async def _ensure_unique_name(session: AsyncSession, context: TenantContext, name: str, exclude_id=None):
    Category = context.schema.category
    stmt = select(Category).where(Category.name == name, Category.deleted_at.is_(None))
    if exclude_id is not None:
        stmt = stmt.where(Category.category_id != exclude_id)
    if (await session.exec(stmt)).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Category name already exists",
        )


@router.get(
    "/",
    response_model=List[CategoryWithDishes],
    dependencies=[Depends(require_permission("categories", Action.VIEW))],
)
async def list_categories(
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    """List categories with their dishes"""
    Category = context.schema.category
    result = await session.exec(
        select(Category)
        .where(Category.deleted_at.is_(None))
        .options(_with_live_dishes(context))
        .order_by(Category.display_order, Category.name)
    )
    return [CategoryWithDishes.model_validate(c) for c in result.all()]


@router.post(
    "/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("categories", Action.CREATE))],
)
async def create_category(
    category_data: CategoryCreate,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    await _ensure_unique_name(session, context, category_data.name)
    category = context.schema.category(**category_data.model_dump())
    session.add(category)
    await session.commit()
    await session.refresh(category)
    logger.info(f"Category created: {category.category_id} ({context.database_name})")
    return category


@router.get(
    "/{category_id}",
    response_model=CategoryWithDishes,
    dependencies=[Depends(require_permission("categories", Action.VIEW))],
)
async def get_category(
    category_id: int,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    category = await _get_category(session, context, category_id)
    return CategoryWithDishes.model_validate(category)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    dependencies=[Depends(require_permission("categories", Action.EDIT))],
)
async def update_category(
    category_id: int,
    category_update: CategoryUpdate,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    category = await _get_category(session, context, category_id)
    update_data = category_update.model_dump(exclude_unset=True)
    if "name" in update_data:
        await _ensure_unique_name(session, context, update_data["name"], exclude_id=category_id)

    for key, value in update_data.items():
        setattr(category, key, value)
    category.updated_at = datetime.utcnow()
    session.add(category)
    await session.commit()
    await session.refresh(category)
    return category


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission("categories", Action.DELETE))],
)
async def delete_category(
    category_id: int,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    """Soft delete a category"""
    category = await _get_category(session, context, category_id)
    category.deleted_at = datetime.utcnow()
    session.add(category)
    await session.commit()
    logger.info(f"Category deleted: {category_id} ({context.database_name})")
