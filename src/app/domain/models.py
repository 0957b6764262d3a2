# src/app/domain/models.py
"""
Domain models for recipes, meal plans and image assets.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class MealType(str, Enum):
    """Slot of the day a planned meal belongs to."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass
class StoredImage:
    """An image held by the asset storage provider."""
    url: str
    storage_ref: str


@dataclass
class UploadedImage:
    """
    A client upload spooled to local disk.
    The file at `path` is temporary and must be removed once transferred.
    """
    path: Path
    filename: str
    content_type: str
    size_bytes: int = 0


@dataclass
class RecipeDraft:
    """Recipe fields before the store assigns id and timestamps."""
    title: str
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    special_diets: list[str] = field(default_factory=list)


@dataclass
class Recipe:
    """
    A persisted recipe.
    `image_url` and `image_ref` always change together.
    """
    id: str
    owner_id: str
    title: str
    ingredients: list[str]
    instructions: list[str]
    image_url: str
    image_ref: str
    tags: list[str] = field(default_factory=list)
    special_diets: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None


@dataclass
class MealPlan:
    """A planned meal on a given day, optionally pointing at a recipe."""
    id: str
    owner_id: str
    planned_date: date
    meal_type: MealType
    recipe_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
