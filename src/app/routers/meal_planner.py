# src/app/routers/meal_planner.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from starlette.concurrency import run_in_threadpool

from src.app.deps import get_current_user, get_meal_plan_service
from src.app.schemas.meal_plans import (
    MealPlanCreate,
    MealPlanListResponse,
    MealPlanResponse,
    MealPlanUpdate,
)
from src.app.schemas.recipes import MessageResponse
from src.app.services.meal_plan_service import MealPlanService
from src.app.services.token_service import CurrentUser

router = APIRouter(prefix="/meal-planner", tags=["meal-planner"])


@router.get("", response_model=MealPlanListResponse)
async def get_all_meal_plans(
    user: CurrentUser = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
) -> MealPlanListResponse:
    meal_plans = await run_in_threadpool(service.list_meal_plans, user.id)
    return MealPlanListResponse(
        mealPlans=[MealPlanResponse.from_domain(item) for item in meal_plans],
        count=len(meal_plans),
    )


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_meal_plan(
    payload: MealPlanCreate,
    user: CurrentUser = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
) -> MealPlanResponse:
    meal_plan = await run_in_threadpool(service.create_meal_plan, user.id, payload.to_fields())
    return MealPlanResponse.from_domain(meal_plan)


@router.put("/{meal_plan_id}", response_model=MealPlanResponse)
async def update_meal_plan(
    meal_plan_id: str,
    payload: MealPlanUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
) -> MealPlanResponse:
    meal_plan = await run_in_threadpool(service.update_meal_plan, user.id, meal_plan_id, payload.to_patch())
    return MealPlanResponse.from_domain(meal_plan)


@router.delete("/{meal_plan_id}", response_model=MessageResponse)
async def delete_meal_plan(
    meal_plan_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
) -> MessageResponse:
    await run_in_threadpool(service.delete_meal_plan, user.id, meal_plan_id)
    return MessageResponse(message="Meal plan deleted successfully")
