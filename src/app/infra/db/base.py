# src/app/infra/db/base.py
"""
Abstract base classes for the document store.
Every read and write is scoped to the owning user.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.app.domain.models import MealPlan, Recipe, RecipeDraft, StoredImage


class RecipeRepository(ABC):
    """
    Abstract interface for recipe persistence.

    Implementations:
    - SupabaseRecipeRepository: `recipes` table through Supabase
    """

    @abstractmethod
    def create_recipe(
        self,
        owner_id: str,
        draft: RecipeDraft,
        image: StoredImage,
    ) -> Recipe:
        """
        Insert a new recipe owned by `owner_id`.

        Args:
            owner_id: The authenticated creator
            draft: Recipe content
            image: Image URL/reference pair to attach

        Returns:
            The stored Recipe with id and created_at assigned
        """
        pass

    @abstractmethod
    def list_recipes(self, owner_id: str) -> list[Recipe]:
        """
        Get all recipes of a user, ordered by creation date ascending.
        """
        pass

    @abstractmethod
    def get_recipe(self, recipe_id: str, owner_id: str) -> Optional[Recipe]:
        """
        Get a recipe by id, only if owned by `owner_id`.

        Returns:
            The recipe, or None if not found or not owned
        """
        pass

    @abstractmethod
    def save_recipe(self, recipe: Recipe) -> Optional[Recipe]:
        """
        Persist every mutable field of an existing recipe.
        The owner filter uses `recipe.owner_id`.

        Returns:
            The saved recipe, or None if it no longer exists
        """
        pass

    @abstractmethod
    def delete_recipe(self, recipe_id: str, owner_id: str) -> Optional[Recipe]:
        """
        Delete a recipe owned by `owner_id`.

        Returns:
            The deleted recipe, or None if nothing matched
        """
        pass


class MealPlanRepository(ABC):
    """
    Abstract interface for meal planner persistence.
    """

    @abstractmethod
    def list_meal_plans(self, owner_id: str) -> list[MealPlan]:
        """Get all meal plan entries of a user, ordered by planned date."""
        pass

    @abstractmethod
    def create_meal_plan(self, owner_id: str, fields: dict[str, Any]) -> MealPlan:
        """Insert a meal plan entry owned by `owner_id`."""
        pass

    @abstractmethod
    def get_meal_plan(self, meal_plan_id: str, owner_id: str) -> Optional[MealPlan]:
        """Get an entry by id, only if owned by `owner_id`."""
        pass

    @abstractmethod
    def update_meal_plan(
        self,
        meal_plan_id: str,
        owner_id: str,
        fields: dict[str, Any],
    ) -> Optional[MealPlan]:
        """Apply `fields` to an owned entry. Returns None if nothing matched."""
        pass

    @abstractmethod
    def delete_meal_plan(self, meal_plan_id: str, owner_id: str) -> Optional[MealPlan]:
        """Delete an owned entry. Returns the deleted entry or None."""
        pass
