# src/app/routers/recipes.py
from __future__ import annotations

import json
import logging
from typing import Any, Optional, Tuple

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from src.app.config import settings
from src.app.deps import get_current_user, get_recipe_generator, get_recipe_service
from src.app.domain.errors import RecipeGenerationError, RecipeValidationError
from src.app.domain.models import UploadedImage
from src.app.schemas.recipes import (
    LIST_FIELDS,
    AiRecipeCreatedResponse,
    AiRecipeRequest,
    GeneratedRecipePayload,
    MessageResponse,
    RecipeCreate,
    RecipeCreatedResponse,
    RecipeListResponse,
    RecipePatch,
    RecipeResponse,
)
from src.app.services.recipe_generator import RecipeGenerator
from src.app.services.recipe_service import RecipeService
from src.app.services.token_service import CurrentUser
from src.app.services.uploads import spool_upload

log = logging.getLogger("recipes")
router = APIRouter(prefix="/recipes", tags=["recipes"])

IMAGE_FIELD = "image"
_FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _form_value(key: str, values: list[Any]) -> Any:
    if key not in LIST_FIELDS:
        return values[-1]
    # a single "[...]" value carries a JSON array, which lets clients send []
    if len(values) == 1 and isinstance(values[0], str) and values[0].strip().startswith("["):
        try:
            return json.loads(values[0])
        except json.JSONDecodeError as error:
            raise RecipeValidationError(f"Field '{key}' is not a valid JSON array.") from error
    # blank entries are dropped, so a single empty value clears the list
    return [value for value in values if isinstance(value, str) and value.strip()]


async def _read_recipe_request(request: Request) -> Tuple[dict[str, Any], Optional[UploadedImage]]:
    """Reads JSON or form fields plus an optional image file from the request."""
    content_type = request.headers.get("content-type", "").lower()

    if not content_type.startswith(_FORM_CONTENT_TYPES):
        try:
            body = await request.json()
        except ValueError as error:
            raise RecipeValidationError("Request body must be JSON or form data.") from error
        if not isinstance(body, dict):
            raise RecipeValidationError("Request body must be a JSON object.")
        return body, None

    fields: dict[str, Any] = {}
    image: Optional[UploadedImage] = None

    async with request.form() as form:
        for key in set(form.keys()):
            if key != IMAGE_FIELD:
                fields[key] = _form_value(key, form.getlist(key))

        upload = form.get(IMAGE_FIELD)
        if isinstance(upload, UploadFile) and upload.filename:
            image = await run_in_threadpool(
                spool_upload,
                upload.file,
                upload.filename,
                upload.content_type or "",
                settings.UPLOAD_TEMP_DIR,
                settings.MAX_UPLOAD_BYTES,
            )

    return fields, image


def _validate(model: type[BaseModel], data: dict[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as error:
        invalid = ", ".join(sorted({str(err["loc"][0]) for err in error.errors() if err.get("loc")}))
        log.info("recipes.invalid_fields model=%s fields=%s", model.__name__, invalid)
        raise RecipeValidationError(f"Invalid recipe fields: {invalid or 'body'}") from error


def _discard(image: Optional[UploadedImage]) -> None:
    if image is not None:
        image.path.unlink(missing_ok=True)


@router.post("/ai")
async def fetch_ai_recipe(
    payload: AiRecipeRequest,
    generator: RecipeGenerator = Depends(get_recipe_generator),
) -> dict[str, Any]:
    log.info("recipes.ai.start options=%d", len(payload.optionValues))
    try:
        return await run_in_threadpool(generator.generate_recipe, payload.query, payload.optionValues)
    except RecipeGenerationError as exc:
        log.error("recipes.ai.fail reason=%s", exc.reason)
        raise


@router.post("/ai/save", response_model=AiRecipeCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_ai_recipe(
    payload: GeneratedRecipePayload,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> AiRecipeCreatedResponse:
    recipe = await run_in_threadpool(service.create_from_generated, user.id, payload.model_dump())
    return AiRecipeCreatedResponse(data=RecipeResponse.from_domain(recipe))


@router.post("", response_model=RecipeCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_manual_recipe(
    request: Request,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeCreatedResponse:
    data, image = await _read_recipe_request(request)
    try:
        body = _validate(RecipeCreate, data)
    except RecipeValidationError:
        _discard(image)
        raise

    recipe = await run_in_threadpool(service.create_manual, user.id, body.to_draft(), image)
    return RecipeCreatedResponse(recipe=RecipeResponse.from_domain(recipe))


@router.get("", response_model=RecipeListResponse)
async def get_all_recipes(
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    recipes = await run_in_threadpool(service.list_recipes, user.id)
    return RecipeListResponse(
        recipes=[RecipeResponse.from_domain(recipe) for recipe in recipes],
        count=len(recipes),
    )


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    recipe = await run_in_threadpool(service.get_recipe, user.id, recipe_id)
    return RecipeResponse.from_domain(recipe)


@router.put("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    request: Request,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    data, image = await _read_recipe_request(request)
    try:
        patch = _validate(RecipePatch, data)
    except RecipeValidationError:
        _discard(image)
        raise

    recipe = await run_in_threadpool(service.update_recipe, user.id, recipe_id, patch.to_patch(), image)
    return RecipeResponse.from_domain(recipe)


@router.delete("/{recipe_id}", response_model=MessageResponse)
async def delete_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> MessageResponse:
    await run_in_threadpool(service.delete_recipe, user.id, recipe_id)
    return MessageResponse(message="Recipe deleted successfully")
