# src/app/services/meal_plan_service.py
"""
Meal planner service.
Owner-scoped entries that may point at the caller's recipes.
"""
from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Any, Mapping

from src.app.domain.errors import (
    MealPlanNotFoundError,
    PersistenceError,
    RecipeNotFoundError,
    RecipeRepositoryError,
)
from src.app.domain.models import MealPlan
from src.app.infra.db.base import MealPlanRepository, RecipeRepository

logger = logging.getLogger(__name__)

MEAL_PLAN_FIELDS = ("planned_date", "meal_type", "recipe_id", "notes")


def _to_row(fields: Mapping[str, Any]) -> dict[str, Any]:
    row: dict[str, Any] = {}
    for key in MEAL_PLAN_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        if isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        row[key] = value
    return row


class MealPlanService:
    def __init__(
        self,
        repository: MealPlanRepository,
        recipe_repository: RecipeRepository,
    ):
        self._repo = repository
        self._recipes = recipe_repository

    def list_meal_plans(self, owner_id: str) -> list[MealPlan]:
        try:
            return self._repo.list_meal_plans(owner_id)
        except RecipeRepositoryError as error:
            raise PersistenceError("Error retrieving meal plans", str(error)) from error

    def create_meal_plan(self, owner_id: str, fields: Mapping[str, Any]) -> MealPlan:
        try:
            self._check_recipe(owner_id, fields.get("recipe_id"))
            return self._repo.create_meal_plan(owner_id, _to_row(fields))
        except RecipeRepositoryError as error:
            logger.error("Error creating meal plan for owner=%s: %s", owner_id, error)
            raise PersistenceError("Error creating meal plan", str(error)) from error

    def update_meal_plan(
        self,
        owner_id: str,
        meal_plan_id: str,
        patch: Mapping[str, Any],
    ) -> MealPlan:
        row = _to_row(patch)

        try:
            if not row:
                existing = self._repo.get_meal_plan(meal_plan_id, owner_id)
                if existing is None:
                    raise MealPlanNotFoundError(meal_plan_id)
                return existing

            self._check_recipe(owner_id, row.get("recipe_id"))
            updated = self._repo.update_meal_plan(meal_plan_id, owner_id, row)
        except RecipeRepositoryError as error:
            logger.error("Error updating meal plan id=%s: %s", meal_plan_id, error)
            raise PersistenceError("Error updating meal plan", str(error)) from error

        if updated is None:
            raise MealPlanNotFoundError(meal_plan_id)
        return updated

    def delete_meal_plan(self, owner_id: str, meal_plan_id: str) -> MealPlan:
        try:
            deleted = self._repo.delete_meal_plan(meal_plan_id, owner_id)
        except RecipeRepositoryError as error:
            logger.error("Error deleting meal plan id=%s: %s", meal_plan_id, error)
            raise PersistenceError("Error deleting meal plan", str(error)) from error

        if deleted is None:
            raise MealPlanNotFoundError(meal_plan_id)
        return deleted

    def _check_recipe(self, owner_id: str, recipe_id: str | None) -> None:
        # a planned meal may only point at one of the caller's recipes
        if recipe_id is None:
            return
        if self._recipes.get_recipe(recipe_id, owner_id) is None:
            raise RecipeNotFoundError(recipe_id)
