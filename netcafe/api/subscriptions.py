"""
Subscription plan endpoints (platform admin)
"""

from fastapi import APIRouter, Depends, status
from typing import List

from netcafe.core.dependencies import get_runtime, verify_admin_key
from netcafe.schemas.subscription import PlanCreate, PlanResponse, PlanUpdate, PlanWithTenants
from netcafe.tenancy.runtime import TenancyRuntime

router = APIRouter(dependencies=[Depends(verify_admin_key)])


@router.post("/", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
async def create_plan(plan: PlanCreate, runtime: TenancyRuntime = Depends(get_runtime)):
    return await runtime.subscriptions.create(plan)


@router.get("/", response_model=List[PlanResponse])
async def list_plans(active_only: bool = False, runtime: TenancyRuntime = Depends(get_runtime)):
    return await runtime.subscriptions.list(active_only=active_only)


@router.get("/{plan_id}", response_model=PlanWithTenants)
async def get_plan(plan_id: int, runtime: TenancyRuntime = Depends(get_runtime)):
    """Plan with its subscribed tenants"""
    return await runtime.subscriptions.get(plan_id)


@router.put("/{plan_id}", response_model=PlanResponse)
async def update_plan(
    plan_id: int,
    plan_update: PlanUpdate,
    runtime: TenancyRuntime = Depends(get_runtime),
):
    return await runtime.subscriptions.update(plan_id, plan_update)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(plan_id: int, runtime: TenancyRuntime = Depends(get_runtime)):
    """Delete a plan; rejected while any tenant references it"""
    await runtime.subscriptions.delete(plan_id)
