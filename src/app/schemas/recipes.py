from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.app.domain.models import Recipe, RecipeDraft

# API field name -> domain field name
PATCH_FIELD_MAP = {
    "recipeTitle": "title",
    "recipeIngredients": "ingredients",
    "recipeInstructions": "instructions",
    "recipeTags": "tags",
    "recipeSpecialDiets": "special_diets",
}

LIST_FIELDS = ("recipeIngredients", "recipeInstructions", "recipeTags", "recipeSpecialDiets")


class AiRecipeRequest(BaseModel):
    query: Optional[str] = None
    optionValues: list[str] = Field(default_factory=list)


class GeneratedRecipePayload(BaseModel):
    """A generated recipe as returned by POST /recipes/ai, sent back to be saved."""
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    specialDiets: list[str] = Field(default_factory=list)
    image: Optional[str] = None


class RecipeCreate(BaseModel):
    # owner and image fields are never accepted from the client
    model_config = ConfigDict(extra="ignore")

    recipeTitle: str = Field(..., min_length=1, max_length=200)
    recipeIngredients: list[str] = Field(default_factory=list)
    recipeInstructions: list[str] = Field(default_factory=list)
    recipeTags: list[str] = Field(default_factory=list)
    recipeSpecialDiets: list[str] = Field(default_factory=list)

    def to_draft(self) -> RecipeDraft:
        return RecipeDraft(
            title=self.recipeTitle.strip(),
            ingredients=list(self.recipeIngredients),
            instructions=list(self.recipeInstructions),
            tags=list(self.recipeTags),
            special_diets=list(self.recipeSpecialDiets),
        )


class RecipePatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    recipeTitle: Optional[str] = Field(None, min_length=1, max_length=200)
    recipeIngredients: Optional[list[str]] = None
    recipeInstructions: Optional[list[str]] = None
    recipeTags: Optional[list[str]] = None
    recipeSpecialDiets: Optional[list[str]] = None

    def to_patch(self) -> dict[str, Any]:
        """Only the fields the client actually sent, keyed by domain name."""
        sent = self.model_dump(exclude_unset=True)
        return {PATCH_FIELD_MAP[key]: value for key, value in sent.items()}


class RecipeResponse(BaseModel):
    id: str
    recipeTitle: str
    recipeIngredients: list[str] = Field(default_factory=list)
    recipeInstructions: list[str] = Field(default_factory=list)
    recipeTags: list[str] = Field(default_factory=list)
    recipeSpecialDiets: list[str] = Field(default_factory=list)
    recipeImage: str
    recipeImagePublic: str
    recipeCreatedBy: str
    createdAt: Optional[datetime] = None

    @classmethod
    def from_domain(cls, recipe: Recipe) -> "RecipeResponse":
        return cls(
            id=recipe.id,
            recipeTitle=recipe.title,
            recipeIngredients=recipe.ingredients,
            recipeInstructions=recipe.instructions,
            recipeTags=recipe.tags,
            recipeSpecialDiets=recipe.special_diets,
            recipeImage=recipe.image_url,
            recipeImagePublic=recipe.image_ref,
            recipeCreatedBy=recipe.owner_id,
            createdAt=recipe.created_at,
        )


class RecipeListResponse(BaseModel):
    recipes: list[RecipeResponse]
    count: int


class RecipeCreatedResponse(BaseModel):
    recipe: RecipeResponse


class AiRecipeCreatedResponse(BaseModel):
    data: RecipeResponse
    message: str = "Recipe created successfully"


class MessageResponse(BaseModel):
    message: str
