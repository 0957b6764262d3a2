from __future__ import annotations

from src.services.prompt_builder import (
    RECIPE_FUNCTION_SCHEMA,
    SYSTEM_PROMPT,
    build_image_query,
    build_messages,
    join_options,
)


class TestBuildMessages:
    def test_system_then_user(self) -> None:
        messages = build_messages("chicken", [])
        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[0]["content"] == SYSTEM_PROMPT

    def test_user_message_carries_query_and_options(self) -> None:
        messages = build_messages("tofu", ["vegan", "gluten-free"])
        content = messages[1]["content"]
        assert "tofu" in content
        assert "vegan, gluten-free" in content

    def test_no_options(self) -> None:
        content = build_messages("rice")[1]["content"]
        assert content.endswith("Preferences or Dietaries:")

    def test_system_prompt_restricts_to_recipes(self) -> None:
        assert "recipe-related" in SYSTEM_PROMPT
        assert "poisonous" in SYSTEM_PROMPT


class TestJoinOptions:
    def test_empty(self) -> None:
        assert join_options([]) == ""
        assert join_options(None) == ""

    def test_joined(self) -> None:
        assert join_options(["keto", "halal"]) == "keto, halal"


class TestRecipeFunctionSchema:
    def test_required_fields(self) -> None:
        params = RECIPE_FUNCTION_SCHEMA["parameters"]
        assert params["required"] == ["title", "ingredients", "instructions"]
        assert params["properties"]["ingredients"]["type"] == "array"
        assert "specialDiets" in params["properties"]


class TestBuildImageQuery:
    def test_title_with_main_ingredients(self) -> None:
        recipe = {"title": "Lemon Chicken", "ingredients": ["chicken", "lemon", "garlic", "salt"]}
        assert build_image_query(recipe) == "Lemon Chicken with chicken, lemon, garlic"

    def test_title_only(self) -> None:
        assert build_image_query({"title": "Toast", "ingredients": []}) == "Toast"
