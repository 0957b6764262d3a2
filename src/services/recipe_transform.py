from __future__ import annotations

from typing import Any, List, Mapping

from src.app.domain.errors import RecipeValidationError
from src.app.domain.models import RecipeDraft


def _clean_str(value: Any) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _clean_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        text = _clean_str(item)
        if text:
            out.append(text)
    return out


def transform_recipe_data(payload: Mapping[str, Any]) -> RecipeDraft:
    """
    Maps a generated recipe (title, ingredients, instructions, tags, specialDiets)
    onto the recipe creation schema. Image fields are left to the caller.
    """
    title = _clean_str(payload.get("title"))
    if not title:
        raise RecipeValidationError("Generated recipe is missing a title.")

    return RecipeDraft(
        title=title,
        ingredients=_clean_list(payload.get("ingredients")),
        instructions=_clean_list(payload.get("instructions")),
        tags=_clean_list(payload.get("tags")),
        special_diets=_clean_list(payload.get("specialDiets")),
    )
