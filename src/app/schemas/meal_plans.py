from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.app.domain.models import MealPlan, MealType

_FIELD_MAP = {
    "plannedDate": "planned_date",
    "mealType": "meal_type",
    "recipeId": "recipe_id",
    "notes": "notes",
}


class MealPlanCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    plannedDate: date
    mealType: MealType
    recipeId: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=500)

    def to_fields(self) -> dict[str, Any]:
        return {_FIELD_MAP[key]: value for key, value in self.model_dump().items()}


class MealPlanUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    plannedDate: Optional[date] = None
    mealType: Optional[MealType] = None
    recipeId: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=500)

    def to_patch(self) -> dict[str, Any]:
        sent = self.model_dump(exclude_unset=True)
        patch = {_FIELD_MAP[key]: value for key, value in sent.items()}
        # date and meal type cannot be cleared
        for required in ("planned_date", "meal_type"):
            if required in patch and patch[required] is None:
                del patch[required]
        return patch


class MealPlanResponse(BaseModel):
    id: str
    plannedDate: date
    mealType: MealType
    recipeId: Optional[str] = None
    notes: Optional[str] = None
    createdBy: str
    createdAt: Optional[datetime] = None

    @classmethod
    def from_domain(cls, meal_plan: MealPlan) -> "MealPlanResponse":
        return cls(
            id=meal_plan.id,
            plannedDate=meal_plan.planned_date,
            mealType=meal_plan.meal_type,
            recipeId=meal_plan.recipe_id,
            notes=meal_plan.notes,
            createdBy=meal_plan.owner_id,
            createdAt=meal_plan.created_at,
        )


class MealPlanListResponse(BaseModel):
    mealPlans: list[MealPlanResponse]
    count: int
