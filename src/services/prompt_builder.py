from __future__ import annotations

from typing import Any, Iterable, Mapping

SYSTEM_PROMPT = (
    "You are a helpful assistant that generates delicious recipes for various ingredients. "
    "Your goal is to provide unique recipes based on user input, considering specific "
    "ingredients, dietary preferences, or cuisine types that are safe for human consumption. "
    "Please do not provide recipes that are poisonous, such as fly agaric. "
    "Please note that you can only answer recipe-related queries. "
    "If you cannot find a relevant meaning in the presented text, please ask the user "
    "to try re-phrasing the question."
)

RECIPE_FUNCTION_NAME = "create_recipe"

RECIPE_FUNCTION_SCHEMA: dict[str, Any] = {
    "name": RECIPE_FUNCTION_NAME,
    "description": "Create a recipe with a title, the ingredient list and the cooking steps.",
    "parameters": {
        "type": "object",
        "properties": {
            "title": {
                "type": "string",
                "description": "Name of the dish.",
            },
            "ingredients": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Ingredients with quantities, one per item.",
            },
            "instructions": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Cooking steps in order, one per item.",
            },
            "tags": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Short labels such as cuisine or course.",
            },
            "specialDiets": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Diets the recipe is suitable for, e.g. vegan or gluten-free.",
            },
        },
        "required": ["title", "ingredients", "instructions"],
    },
}

_IMAGE_QUERY_INGREDIENTS = 3


def join_options(options: Iterable[str] | None) -> str:
    if not options:
        return ""
    return ", ".join(options)


def build_messages(query: str, options: Iterable[str] | None = None) -> list[dict[str, str]]:
    """Returns the chat messages (system + user) for a recipe query."""
    user_content = (
        f"User receives a recipe based on following ingredient: {query}. "
        f"Preferences or Dietaries:{join_options(options)}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


def build_image_query(recipe: Mapping[str, Any]) -> str:
    """Derives an image-search query from a generated recipe's title and main ingredients."""
    title = str(recipe.get("title") or "").strip()
    ingredients = recipe.get("ingredients") or []

    main_ingredients = [
        str(item).strip()
        for item in ingredients[:_IMAGE_QUERY_INGREDIENTS]
        if str(item).strip()
    ]

    if not main_ingredients:
        return title
    return f"{title} with {', '.join(main_ingredients)}".strip()
