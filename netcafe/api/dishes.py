"""
Dish endpoints (tenant scoped)
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import List
from datetime import datetime
import structlog

from netcafe.core.dependencies import get_tenant_context, get_tenant_session
from netcafe.core.permissions import Action, require_permission
from netcafe.schemas.menu import DishCreate, DishResponse, DishUpdate
from netcafe.tenancy.resolver import TenantContext

logger = structlog.get_logger(__name__)
router = APIRouter()


async def _require_category(session: AsyncSession, context: TenantContext, category_id: int) -> None:
    category = await session.get(context.schema.category, category_id)
    if not category or category.deleted_at is not None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )


async def _get_dish(session: AsyncSession, context: TenantContext, dish_id: int):
    dish = await session.get(context.schema.dish, dish_id)
    if not dish or dish.deleted_at is not None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dish not found",
        )
    return dish


@router.get(
    "/available",
    response_model=List[DishResponse],
    dependencies=[Depends(require_permission("dishes", Action.VIEW))],
)
async def list_available_dishes(
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    """Dishes currently on offer"""
    Dish = context.schema.dish
    result = await session.exec(
        select(Dish)
        .where(Dish.is_available == True, Dish.deleted_at.is_(None))  # noqa: E712
        .order_by(Dish.category_id, Dish.name)
    )
    return result.all()


@router.post(
    "/",
    response_model=DishResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("dishes", Action.CREATE))],
)
async def create_dish(
    dish_data: DishCreate,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    await _require_category(session, context, dish_data.category_id)
    dish = context.schema.dish(**dish_data.model_dump())
    session.add(dish)
    await session.commit()
    await session.refresh(dish)
    logger.info(f"Dish created: {dish.dish_id} ({context.database_name})")
    return dish


@router.put(
    "/{dish_id}",
    response_model=DishResponse,
    dependencies=[Depends(require_permission("dishes", Action.EDIT))],
)
async def update_dish(
    dish_id: int,
    dish_update: DishUpdate,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    dish = await _get_dish(session, context, dish_id)
    update_data = dish_update.model_dump(exclude_unset=True)
    if update_data.get("category_id") is not None:
        await _require_category(session, context, update_data["category_id"])

    for key, value in update_data.items():
        setattr(dish, key, value)
    dish.updated_at = datetime.utcnow()
    session.add(dish)
    await session.commit()
    await session.refresh(dish)
    return dish


@router.delete(
    "/{dish_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission("dishes", Action.DELETE))],
)
async def delete_dish(
    dish_id: int,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_tenant_session),
):
    """Soft delete a dish"""
    dish = await _get_dish(session, context, dish_id)
    dish.deleted_at = datetime.utcnow()
    session.add(dish)
    await session.commit()
    logger.info(f"Dish deleted: {dish_id} ({context.database_name})")
