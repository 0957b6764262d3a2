# src/app/services/recipe_service.py
"""
Recipe persistence service.
Owner-scoped CRUD over recipes, including the image asset lifecycle.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from src.app.domain.errors import (
    PersistenceError,
    RecipeNotFoundError,
    RecipeRepositoryError,
    StorageError,
)
from src.app.domain.models import Recipe, RecipeDraft, StoredImage, UploadedImage
from src.app.infra.db.base import RecipeRepository
from src.app.infra.storage.base import StorageProvider
from src.services.recipe_transform import transform_recipe_data

logger = logging.getLogger(__name__)

# Fields a patch overwrites when present and non-null
MERGE_FIELDS = ("title", "ingredients", "instructions")
# Fields a patch replaces when present; null or [] clears them
REPLACE_FIELDS = ("tags", "special_diets")


class RecipeService:
    """
    Service for user-owned recipes.

    Responsibilities:
    - Create recipes from manual input or generated recipes
    - Read, update and delete only the caller's recipes
    - Upload new images and delete images no longer referenced
    - Remove temporary upload files on every path
    """

    def __init__(
        self,
        repository: RecipeRepository,
        storage: Optional[StorageProvider],
        default_image: StoredImage,
    ):
        self._repo = repository
        self._storage = storage
        self.default_image = default_image

    def create_manual(
        self,
        owner_id: str,
        draft: RecipeDraft,
        image: Optional[UploadedImage] = None,
    ) -> Recipe:
        """
        Create a recipe from client-supplied fields.

        Without an uploaded image the default image pair is attached.

        Raises:
            PersistenceError: If the upload or the insert fails
        """
        try:
            stored = self.default_image if image is None else self._upload(owner_id, image)
            try:
                recipe = self._repo.create_recipe(owner_id, draft, stored)
            except RecipeRepositoryError:
                self._discard_image(stored.storage_ref)
                raise
        except (StorageError, RecipeRepositoryError) as error:
            logger.error("Error creating manual recipe for owner=%s: %s", owner_id, error)
            raise PersistenceError("Error uploading image or creating recipe", str(error)) from error
        finally:
            self._release_upload(image)

        return recipe

    def create_from_generated(self, owner_id: str, payload: Mapping[str, Any]) -> Recipe:
        """
        Save a generated recipe for the caller with the default image.

        Raises:
            RecipeValidationError: If the payload has no title
            PersistenceError: If the insert fails
        """
        draft = transform_recipe_data(payload)

        try:
            return self._repo.create_recipe(owner_id, draft, self.default_image)
        except RecipeRepositoryError as error:
            logger.error("Error saving generated recipe for owner=%s: %s", owner_id, error)
            raise PersistenceError("Error creating recipe", str(error)) from error

    def list_recipes(self, owner_id: str) -> list[Recipe]:
        try:
            return self._repo.list_recipes(owner_id)
        except RecipeRepositoryError as error:
            raise PersistenceError("Error retrieving recipes", str(error)) from error

    def get_recipe(self, owner_id: str, recipe_id: str) -> Recipe:
        """
        Raises:
            RecipeNotFoundError: If the recipe does not exist or is not owned by the caller
            PersistenceError: If the store lookup fails
        """
        try:
            recipe = self._repo.get_recipe(recipe_id, owner_id)
        except RecipeRepositoryError as error:
            raise PersistenceError("Error retrieving recipe", str(error)) from error

        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe

    def update_recipe(
        self,
        owner_id: str,
        recipe_id: str,
        patch: Mapping[str, Any],
        image: Optional[UploadedImage] = None,
    ) -> Recipe:
        """
        Apply a partial update to an owned recipe.

        A new image replaces the stored pair; the previous asset is deleted
        only after the record is saved.

        Raises:
            RecipeNotFoundError: If the recipe does not exist or is not owned by the caller
            PersistenceError: If the upload or the save fails
        """
        previous_ref: Optional[str] = None

        try:
            recipe = self._repo.get_recipe(recipe_id, owner_id)
            if recipe is None:
                raise RecipeNotFoundError(recipe_id)

            new_image: Optional[StoredImage] = None
            if image is not None:
                new_image = self._upload(owner_id, image)
                previous_ref = recipe.image_ref
                recipe.image_url = new_image.url
                recipe.image_ref = new_image.storage_ref

            apply_patch(recipe, patch)

            try:
                saved = self._repo.save_recipe(recipe)
            except RecipeRepositoryError:
                if new_image is not None:
                    self._discard_image(new_image.storage_ref)
                raise

            if saved is None:
                if new_image is not None:
                    self._discard_image(new_image.storage_ref)
                raise RecipeNotFoundError(recipe_id)

        except (StorageError, RecipeRepositoryError) as error:
            logger.error("Error updating recipe id=%s: %s", recipe_id, error)
            raise PersistenceError("Error updating recipe", str(error)) from error
        finally:
            self._release_upload(image)

        if previous_ref:
            self._discard_image(previous_ref)

        logger.info("Updated recipe: id=%s, owner=%s, new_image=%s", recipe_id, owner_id, image is not None)
        return saved

    def delete_recipe(self, owner_id: str, recipe_id: str) -> Recipe:
        """
        Delete an owned recipe and its uploaded image.

        Raises:
            RecipeNotFoundError: If the recipe does not exist or is not owned by the caller
            PersistenceError: If the delete fails
        """
        try:
            deleted = self._repo.delete_recipe(recipe_id, owner_id)
        except RecipeRepositoryError as error:
            logger.error("Error deleting recipe id=%s: %s", recipe_id, error)
            raise PersistenceError("Error deleting recipe", str(error)) from error

        if deleted is None:
            raise RecipeNotFoundError(recipe_id)

        self._discard_image(deleted.image_ref)
        return deleted

    def _upload(self, owner_id: str, image: UploadedImage) -> StoredImage:
        if self._storage is None:
            raise StorageError("Image storage is not configured")
        return self._storage.upload_image(
            source_path=image.path,
            content_type=image.content_type,
            owner_id=owner_id,
            filename=image.filename,
        )

    def _discard_image(self, storage_ref: str) -> None:
        if not storage_ref or storage_ref == self.default_image.storage_ref:
            return

        if self._storage is None:
            logger.warning("Image storage is not configured, leaving asset %s in place", storage_ref)
            return

        if not self._storage.delete_object(storage_ref):
            logger.warning("Could not delete image asset %s", storage_ref)

    def _release_upload(self, image: Optional[UploadedImage]) -> None:
        if image is None:
            return

        if not image.path.exists():
            return

        try:
            image.path.unlink()
            logger.debug("Cleaned up temp upload: %s", image.path)
        except OSError as os_error:
            logger.warning(
                "Failed to cleanup temp upload %s: %s",
                image.path,
                os_error,
            )


def apply_patch(recipe: Recipe, patch: Mapping[str, Any]) -> Recipe:
    """
    Field-level merge of a patch onto a recipe.
    Owner, id, creation time and image fields are never taken from the patch.
    """
    for field_name in REPLACE_FIELDS:
        if field_name in patch:
            setattr(recipe, field_name, list(patch[field_name] or []))

    for field_name in MERGE_FIELDS:
        value = patch.get(field_name)
        if value is None:
            continue
        setattr(recipe, field_name, list(value) if isinstance(value, list) else value)

    return recipe
