from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from src.app.domain.errors import RecipeRepositoryError
from src.app.domain.models import Recipe, RecipeDraft, StoredImage
from src.app.infra.db.base import RecipeRepository

logger = logging.getLogger(__name__)

# Errors the Supabase client surfaces for failed queries or transport problems
STORE_ERRORS = (APIError, httpx.HTTPError, ConnectionError, TimeoutError)


def parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _safe_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def is_valid_id(value: str) -> bool:
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


def _row_to_recipe(row: dict[str, Any]) -> Recipe:
    return Recipe(
        id=str(row["id"]),
        owner_id=str(row["created_by"]),
        title=str(row.get("title") or ""),
        ingredients=_safe_list(row.get("ingredients")),
        instructions=_safe_list(row.get("instructions")),
        image_url=str(row.get("image_url") or ""),
        image_ref=str(row.get("image_ref") or ""),
        tags=_safe_list(row.get("tags")),
        special_diets=_safe_list(row.get("special_diets")),
        created_at=parse_datetime(row.get("created_at")),
    )


def _recipe_to_row(recipe: Recipe) -> dict[str, Any]:
    return {
        "title": recipe.title,
        "ingredients": list(recipe.ingredients),
        "instructions": list(recipe.instructions),
        "tags": list(recipe.tags),
        "special_diets": list(recipe.special_diets),
        "image_url": recipe.image_url,
        "image_ref": recipe.image_ref,
    }


class SupabaseRecipeRepository(RecipeRepository):
    TABLE_NAME = "recipes"

    def __init__(self, client: Client):
        self._client = client
        logger.info("SupabaseRecipeRepository initialized")

    def create_recipe(
        self,
        owner_id: str,
        draft: RecipeDraft,
        image: StoredImage,
    ) -> Recipe:
        row = {
            "created_by": owner_id,
            "title": draft.title,
            "ingredients": list(draft.ingredients),
            "instructions": list(draft.instructions),
            "tags": list(draft.tags),
            "special_diets": list(draft.special_diets),
            "image_url": image.url,
            "image_ref": image.storage_ref,
        }

        try:
            result = self._client.table(self.TABLE_NAME).insert(row).execute()
        except STORE_ERRORS as error:
            logger.error("Error inserting recipe for owner=%s: %s", owner_id, error)
            raise RecipeRepositoryError("create", str(error)) from error

        if not result.data:
            raise RecipeRepositoryError("create", "insert returned no rows")

        recipe = _row_to_recipe(result.data[0])
        logger.info("Created recipe: id=%s, owner=%s", recipe.id, owner_id)
        return recipe

    def list_recipes(self, owner_id: str) -> list[Recipe]:
        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .select("*")
                .eq("created_by", owner_id)
                .order("created_at")
                .execute()
            )
        except STORE_ERRORS as error:
            logger.error("Error listing recipes for owner=%s: %s", owner_id, error)
            raise RecipeRepositoryError("list", str(error)) from error

        return [_row_to_recipe(row) for row in result.data or []]

    def get_recipe(self, recipe_id: str, owner_id: str) -> Recipe | None:
        if not is_valid_id(recipe_id):
            return None

        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .select("*")
                .eq("id", recipe_id)
                .eq("created_by", owner_id)
                .limit(1)
                .execute()
            )
        except STORE_ERRORS as error:
            logger.error("Error fetching recipe id=%s: %s", recipe_id, error)
            raise RecipeRepositoryError("get", str(error)) from error

        if not result.data:
            return None
        return _row_to_recipe(result.data[0])

    def save_recipe(self, recipe: Recipe) -> Recipe | None:
        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .update(_recipe_to_row(recipe))
                .eq("id", recipe.id)
                .eq("created_by", recipe.owner_id)
                .execute()
            )
        except STORE_ERRORS as error:
            logger.error("Error saving recipe id=%s: %s", recipe.id, error)
            raise RecipeRepositoryError("update", str(error)) from error

        if not result.data:
            return None
        return _row_to_recipe(result.data[0])

    def delete_recipe(self, recipe_id: str, owner_id: str) -> Recipe | None:
        if not is_valid_id(recipe_id):
            return None

        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .delete()
                .eq("id", recipe_id)
                .eq("created_by", owner_id)
                .execute()
            )
        except STORE_ERRORS as error:
            logger.error("Error deleting recipe id=%s: %s", recipe_id, error)
            raise RecipeRepositoryError("delete", str(error)) from error

        if not result.data:
            return None

        recipe = _row_to_recipe(result.data[0])
        logger.info("Deleted recipe: id=%s, owner=%s", recipe.id, owner_id)
        return recipe
