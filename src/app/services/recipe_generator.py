# src/app/services/recipe_generator.py
"""
Recipe generation service.
Sequences a recipe query through the language model and the image search.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from src.app.domain.errors import RecipeGenerationError, RecipeValidationError
from src.services.errors import ServiceError, UpstreamParseError
from src.services.image_search import BingImageSearchClient
from src.services.openai_client import OpenAIChatClient
from src.services.prompt_builder import RECIPE_FUNCTION_SCHEMA, build_image_query, build_messages

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.4
DEFAULT_MAX_TOKENS = 750
_REQUIRED_LIST_FIELDS = ("ingredients", "instructions")


def _validate_generated_recipe(data: dict[str, Any]) -> dict[str, Any]:
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        raise UpstreamParseError("Generated recipe has no title")

    for field_name in _REQUIRED_LIST_FIELDS:
        value = data.get(field_name)
        if not isinstance(value, list):
            raise UpstreamParseError(f"Generated recipe field '{field_name}' must be a list")

    return data


class RecipeGenerator:
    """
    Turns a free-text query into a structured recipe with an image URL.

    Responsibilities:
    - Reject empty queries before any external call
    - Ask the language model for a function-call recipe
    - Look up an image for the recipe
    - Collapse provider failures into RecipeGenerationError
    """

    def __init__(
        self,
        llm_client: OpenAIChatClient,
        image_search: BingImageSearchClient,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        require_image: bool = True,
    ):
        self._llm = llm_client
        self._images = image_search
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.require_image = require_image

    def generate_recipe(
        self,
        query: Optional[str],
        options: Optional[Iterable[str]] = None,
    ) -> dict[str, Any]:
        """
        Generate a recipe for a query and preference options.

        Args:
            query: Ingredient, dish or cuisine the user asked for
            options: Preference or dietary labels, may be empty

        Returns:
            The generated recipe fields plus an "image" URL ("" when none found)

        Raises:
            RecipeValidationError: If the query is empty
            RecipeGenerationError: If any provider call fails
        """
        if query is None or not query.strip():
            raise RecipeValidationError("Please provide a query.")

        option_values = list(options or [])

        try:
            recipe = self._request_recipe(query, option_values)
        except ServiceError as error:
            logger.error("Recipe generation failed at language model: %s", error)
            raise RecipeGenerationError(str(error)) from error

        recipe["image"] = self._lookup_image(recipe)
        logger.info("Generated recipe: title=%r, image_found=%s", recipe["title"], bool(recipe["image"]))
        return recipe

    def _request_recipe(self, query: str, options: list[str]) -> dict[str, Any]:
        arguments = self._llm.complete_function_call(
            messages=build_messages(query, options),
            functions=[RECIPE_FUNCTION_SCHEMA],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return _validate_generated_recipe(arguments)

    def _lookup_image(self, recipe: dict[str, Any]) -> str:
        image_query = build_image_query(recipe)
        try:
            return self._images.first_image_url(image_query)
        except ServiceError as error:
            if self.require_image:
                logger.error("Recipe generation failed at image search: %s", error)
                raise RecipeGenerationError(str(error)) from error
            logger.warning("Image search failed, returning recipe without image: %s", error)
            return ""
