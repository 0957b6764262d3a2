from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import pytest

from src.app.domain.errors import (
    PersistenceError,
    RecipeNotFoundError,
    RecipeRepositoryError,
    RecipeValidationError,
    StorageUploadError,
)
from src.app.domain.models import Recipe, RecipeDraft, StoredImage, UploadedImage
from src.app.infra.db.base import RecipeRepository
from src.app.infra.storage.base import StorageProvider
from src.app.services.recipe_service import RecipeService, apply_patch

DEFAULT_IMAGE = StoredImage(url="https://cdn.example.com/default.png", storage_ref="default_image")


class RecipeRepositoryStub(RecipeRepository):
    def __init__(self) -> None:
        self.rows: dict[str, Recipe] = {}
        self.fail_on: set[str] = set()
        self._next_id = 0

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RecipeRepositoryError(operation, "store unavailable")

    def create_recipe(self, owner_id: str, draft: RecipeDraft, image: StoredImage) -> Recipe:
        self._check("create")
        self._next_id += 1
        recipe = Recipe(
            id=f"r{self._next_id}",
            owner_id=owner_id,
            title=draft.title,
            ingredients=list(draft.ingredients),
            instructions=list(draft.instructions),
            image_url=image.url,
            image_ref=image.storage_ref,
            tags=list(draft.tags),
            special_diets=list(draft.special_diets),
        )
        self.rows[recipe.id] = recipe
        return copy.deepcopy(recipe)

    def list_recipes(self, owner_id: str) -> list[Recipe]:
        self._check("list")
        return [copy.deepcopy(r) for r in self.rows.values() if r.owner_id == owner_id]

    def get_recipe(self, recipe_id: str, owner_id: str) -> Optional[Recipe]:
        self._check("get")
        recipe = self.rows.get(recipe_id)
        if recipe is None or recipe.owner_id != owner_id:
            return None
        return copy.deepcopy(recipe)

    def save_recipe(self, recipe: Recipe) -> Optional[Recipe]:
        self._check("update")
        if recipe.id not in self.rows:
            return None
        self.rows[recipe.id] = copy.deepcopy(recipe)
        return copy.deepcopy(recipe)

    def delete_recipe(self, recipe_id: str, owner_id: str) -> Optional[Recipe]:
        self._check("delete")
        recipe = self.rows.get(recipe_id)
        if recipe is None or recipe.owner_id != owner_id:
            return None
        return self.rows.pop(recipe_id)


class StorageStub(StorageProvider):
    def __init__(self) -> None:
        self.uploaded: list[str] = []
        self.deleted: list[str] = []
        self.fail_upload = False

    def upload_image(self, source_path: Path, content_type: str, owner_id: str, filename: str) -> StoredImage:
        if self.fail_upload:
            raise StorageUploadError(str(source_path), "AccessDenied")
        key = f"users/{owner_id}/recipes/{len(self.uploaded) + 1}_{filename}"
        self.uploaded.append(key)
        return StoredImage(url=f"https://cdn.example.com/{key}", storage_ref=key)

    def delete_object(self, object_key: str) -> bool:
        self.deleted.append(object_key)
        return True


def _upload(tmp_path: Path, name: str = "photo.png") -> UploadedImage:
    path = tmp_path / name
    path.write_bytes(b"\x89PNG fake")
    return UploadedImage(path=path, filename=name, content_type="image/png", size_bytes=9)


@pytest.fixture
def repo() -> RecipeRepositoryStub:
    return RecipeRepositoryStub()


@pytest.fixture
def storage() -> StorageStub:
    return StorageStub()


@pytest.fixture
def service(repo: RecipeRepositoryStub, storage: StorageStub) -> RecipeService:
    return RecipeService(repository=repo, storage=storage, default_image=DEFAULT_IMAGE)


class TestCreateManual:
    def test_default_image_without_upload(self, service: RecipeService, storage: StorageStub) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup", ingredients=["water"]))

        assert recipe.owner_id == "u1"
        assert recipe.image_url == DEFAULT_IMAGE.url
        assert recipe.image_ref == DEFAULT_IMAGE.storage_ref
        assert storage.uploaded == []

    def test_uploads_image_and_removes_temp_file(
        self, service: RecipeService, storage: StorageStub, tmp_path: Path
    ) -> None:
        upload = _upload(tmp_path)

        recipe = service.create_manual("u1", RecipeDraft(title="Soup"), upload)

        assert recipe.image_ref == storage.uploaded[0]
        assert recipe.image_url.endswith(storage.uploaded[0])
        assert not upload.path.exists()

    def test_insert_failure_discards_new_asset(
        self, service: RecipeService, repo: RecipeRepositoryStub, storage: StorageStub, tmp_path: Path
    ) -> None:
        repo.fail_on.add("create")
        upload = _upload(tmp_path)

        with pytest.raises(PersistenceError) as exc_info:
            service.create_manual("u1", RecipeDraft(title="Soup"), upload)

        assert exc_info.value.public_message == "Error uploading image or creating recipe"
        assert storage.deleted == storage.uploaded
        assert not upload.path.exists()

    def test_upload_failure(self, service: RecipeService, repo: RecipeRepositoryStub, storage: StorageStub, tmp_path: Path) -> None:
        storage.fail_upload = True
        upload = _upload(tmp_path)

        with pytest.raises(PersistenceError):
            service.create_manual("u1", RecipeDraft(title="Soup"), upload)

        assert repo.rows == {}
        assert not upload.path.exists()

    def test_upload_without_storage(self, repo: RecipeRepositoryStub, tmp_path: Path) -> None:
        service = RecipeService(repository=repo, storage=None, default_image=DEFAULT_IMAGE)
        upload = _upload(tmp_path)

        with pytest.raises(PersistenceError):
            service.create_manual("u1", RecipeDraft(title="Soup"), upload)
        assert not upload.path.exists()


class TestCreateFromGenerated:
    def test_saves_with_default_image(self, service: RecipeService) -> None:
        recipe = service.create_from_generated("u1", {
            "title": "Lemon Chicken",
            "ingredients": ["chicken", "lemon"],
            "instructions": ["Roast"],
            "specialDiets": ["gluten-free"],
            "image": "http://img/1.png",
        })

        assert recipe.title == "Lemon Chicken"
        assert recipe.special_diets == ["gluten-free"]
        assert recipe.image_url == DEFAULT_IMAGE.url
        assert recipe.image_ref == DEFAULT_IMAGE.storage_ref

    def test_missing_title(self, service: RecipeService) -> None:
        with pytest.raises(RecipeValidationError):
            service.create_from_generated("u1", {"ingredients": ["egg"]})

    def test_store_failure(self, service: RecipeService, repo: RecipeRepositoryStub) -> None:
        repo.fail_on.add("create")
        with pytest.raises(PersistenceError) as exc_info:
            service.create_from_generated("u1", {"title": "Soup"})
        assert exc_info.value.public_message == "Error creating recipe"


class TestReadRecipes:
    def test_list_only_own(self, service: RecipeService) -> None:
        service.create_manual("u1", RecipeDraft(title="Soup"))
        service.create_manual("u2", RecipeDraft(title="Stew"))

        titles = [r.title for r in service.list_recipes("u1")]
        assert titles == ["Soup"]

    def test_list_failure(self, service: RecipeService, repo: RecipeRepositoryStub) -> None:
        repo.fail_on.add("list")
        with pytest.raises(PersistenceError) as exc_info:
            service.list_recipes("u1")
        assert exc_info.value.public_message == "Error retrieving recipes"

    def test_get_other_owner_is_not_found(self, service: RecipeService) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"))
        with pytest.raises(RecipeNotFoundError):
            service.get_recipe("u2", recipe.id)

    def test_get_unknown(self, service: RecipeService) -> None:
        with pytest.raises(RecipeNotFoundError):
            service.get_recipe("u1", "missing")


class TestUpdateRecipe:
    def test_empty_tags_clear(self, service: RecipeService) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup", tags=["a", "b"]))

        updated = service.update_recipe("u1", recipe.id, {"tags": []})

        assert updated.tags == []

    def test_omitted_fields_preserved(self, service: RecipeService) -> None:
        recipe = service.create_manual(
            "u1", RecipeDraft(title="Soup", ingredients=["water"], tags=["a"], special_diets=["vegan"])
        )

        updated = service.update_recipe("u1", recipe.id, {"title": "Broth"})

        assert updated.title == "Broth"
        assert updated.ingredients == ["water"]
        assert updated.tags == ["a"]
        assert updated.special_diets == ["vegan"]

    def test_null_title_keeps_existing(self, service: RecipeService) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"))
        updated = service.update_recipe("u1", recipe.id, {"title": None})
        assert updated.title == "Soup"

    def test_new_image_replaces_and_deletes_previous(
        self, service: RecipeService, storage: StorageStub, tmp_path: Path
    ) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"), _upload(tmp_path, "old.png"))
        old_ref = recipe.image_ref

        new_upload = _upload(tmp_path, "new.png")
        updated = service.update_recipe("u1", recipe.id, {}, new_upload)

        assert updated.image_ref == storage.uploaded[-1]
        assert updated.image_ref != old_ref
        assert updated.image_url.endswith(updated.image_ref)
        assert storage.deleted == [old_ref]
        assert not new_upload.path.exists()

    def test_default_image_never_deleted(
        self, service: RecipeService, storage: StorageStub, tmp_path: Path
    ) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"))

        service.update_recipe("u1", recipe.id, {}, _upload(tmp_path))

        assert storage.deleted == []

    def test_save_failure_keeps_old_image(
        self, service: RecipeService, repo: RecipeRepositoryStub, storage: StorageStub, tmp_path: Path
    ) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"), _upload(tmp_path, "old.png"))
        old_ref = recipe.image_ref
        repo.fail_on.add("update")

        with pytest.raises(PersistenceError) as exc_info:
            service.update_recipe("u1", recipe.id, {"title": "Broth"}, _upload(tmp_path, "new.png"))

        assert exc_info.value.public_message == "Error updating recipe"
        assert old_ref not in storage.deleted
        assert storage.deleted == [storage.uploaded[-1]]
        assert repo.rows[recipe.id].image_ref == old_ref
        assert repo.rows[recipe.id].title == "Soup"

    def test_other_owner(self, service: RecipeService, storage: StorageStub, tmp_path: Path) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"))
        upload = _upload(tmp_path)

        with pytest.raises(RecipeNotFoundError):
            service.update_recipe("u2", recipe.id, {"title": "Mine"}, upload)

        assert storage.uploaded == []
        assert not upload.path.exists()


class TestDeleteRecipe:
    def test_deletes_record_and_image(self, service: RecipeService, repo: RecipeRepositoryStub, storage: StorageStub, tmp_path: Path) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"), _upload(tmp_path))

        service.delete_recipe("u1", recipe.id)

        assert recipe.id not in repo.rows
        assert storage.deleted == [recipe.image_ref]

    def test_default_image_kept(self, service: RecipeService, storage: StorageStub) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"))
        service.delete_recipe("u1", recipe.id)
        assert storage.deleted == []

    def test_other_owner(self, service: RecipeService, repo: RecipeRepositoryStub) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"))

        with pytest.raises(RecipeNotFoundError):
            service.delete_recipe("u2", recipe.id)
        assert recipe.id in repo.rows

    def test_store_failure(self, service: RecipeService, repo: RecipeRepositoryStub) -> None:
        recipe = service.create_manual("u1", RecipeDraft(title="Soup"))
        repo.fail_on.add("delete")

        with pytest.raises(PersistenceError) as exc_info:
            service.delete_recipe("u1", recipe.id)
        assert exc_info.value.public_message == "Error deleting recipe"


class TestApplyPatch:
    def _recipe(self) -> Recipe:
        return Recipe(
            id="r1",
            owner_id="u1",
            title="Soup",
            ingredients=["water"],
            instructions=["Boil"],
            image_url="https://cdn.example.com/a.png",
            image_ref="a.png",
            tags=["winter"],
            special_diets=["vegan"],
        )

    def test_null_replace_field_clears(self) -> None:
        recipe = apply_patch(self._recipe(), {"special_diets": None})
        assert recipe.special_diets == []

    def test_owner_and_image_ignored(self) -> None:
        recipe = apply_patch(self._recipe(), {"owner_id": "u2", "image_ref": "b.png"})
        assert recipe.owner_id == "u1"
        assert recipe.image_ref == "a.png"
