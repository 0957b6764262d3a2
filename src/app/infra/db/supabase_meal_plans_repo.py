from __future__ import annotations

import logging
from datetime import date
from typing import Any

from supabase import Client

from src.app.domain.errors import RecipeRepositoryError
from src.app.domain.models import MealPlan, MealType
from src.app.infra.db.base import MealPlanRepository
from src.app.infra.db.supabase_recipes_repo import STORE_ERRORS, parse_datetime, is_valid_id

logger = logging.getLogger(__name__)


def _row_to_meal_plan(row: dict[str, Any]) -> MealPlan:
    return MealPlan(
        id=str(row["id"]),
        owner_id=str(row["created_by"]),
        planned_date=date.fromisoformat(str(row["planned_date"])[:10]),
        meal_type=MealType(str(row["meal_type"])),
        recipe_id=str(row["recipe_id"]) if row.get("recipe_id") else None,
        notes=str(row["notes"]) if row.get("notes") else None,
        created_at=parse_datetime(row.get("created_at")),
    )


class SupabaseMealPlanRepository(MealPlanRepository):
    TABLE_NAME = "meal_plans"

    def __init__(self, client: Client):
        self._client = client
        logger.info("SupabaseMealPlanRepository initialized")

    def list_meal_plans(self, owner_id: str) -> list[MealPlan]:
        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .select("*")
                .eq("created_by", owner_id)
                .order("planned_date")
                .order("created_at")
                .execute()
            )
        except STORE_ERRORS as error:
            logger.error("Error listing meal plans for owner=%s: %s", owner_id, error)
            raise RecipeRepositoryError("list_meal_plans", str(error)) from error

        return [_row_to_meal_plan(row) for row in result.data or []]

    def create_meal_plan(self, owner_id: str, fields: dict[str, Any]) -> MealPlan:
        row = {**fields, "created_by": owner_id}

        try:
            result = self._client.table(self.TABLE_NAME).insert(row).execute()
        except STORE_ERRORS as error:
            logger.error("Error inserting meal plan for owner=%s: %s", owner_id, error)
            raise RecipeRepositoryError("create_meal_plan", str(error)) from error

        if not result.data:
            raise RecipeRepositoryError("create_meal_plan", "insert returned no rows")

        meal_plan = _row_to_meal_plan(result.data[0])
        logger.info("Created meal plan: id=%s, owner=%s", meal_plan.id, owner_id)
        return meal_plan

    def get_meal_plan(self, meal_plan_id: str, owner_id: str) -> MealPlan | None:
        if not is_valid_id(meal_plan_id):
            return None

        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .select("*")
                .eq("id", meal_plan_id)
                .eq("created_by", owner_id)
                .limit(1)
                .execute()
            )
        except STORE_ERRORS as error:
            logger.error("Error fetching meal plan id=%s: %s", meal_plan_id, error)
            raise RecipeRepositoryError("get_meal_plan", str(error)) from error

        if not result.data:
            return None
        return _row_to_meal_plan(result.data[0])

    def update_meal_plan(
        self,
        meal_plan_id: str,
        owner_id: str,
        fields: dict[str, Any],
    ) -> MealPlan | None:
        if not is_valid_id(meal_plan_id):
            return None

        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .update(fields)
                .eq("id", meal_plan_id)
                .eq("created_by", owner_id)
                .execute()
            )
        except STORE_ERRORS as error:
            logger.error("Error updating meal plan id=%s: %s", meal_plan_id, error)
            raise RecipeRepositoryError("update_meal_plan", str(error)) from error

        if not result.data:
            return None
        return _row_to_meal_plan(result.data[0])

    def delete_meal_plan(self, meal_plan_id: str, owner_id: str) -> MealPlan | None:
        if not is_valid_id(meal_plan_id):
            return None

        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .delete()
                .eq("id", meal_plan_id)
                .eq("created_by", owner_id)
                .execute()
            )
        except STORE_ERRORS as error:
            logger.error("Error deleting meal plan id=%s: %s", meal_plan_id, error)
            raise RecipeRepositoryError("delete_meal_plan", str(error)) from error

        if not result.data:
            return None
        return _row_to_meal_plan(result.data[0])
