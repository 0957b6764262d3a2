# src/app/deps.py (singletons for vendor clients, exposed as dependencies)

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client, create_client

from src.app.config import settings
from src.app.domain.errors import StorageError
from src.app.domain.models import StoredImage
from src.app.infra.db.base import MealPlanRepository, RecipeRepository
from src.app.infra.db.supabase_meal_plans_repo import SupabaseMealPlanRepository
from src.app.infra.db.supabase_recipes_repo import SupabaseRecipeRepository
from src.app.infra.storage.base import StorageProvider
from src.app.infra.storage.r2_provider import R2StorageProvider
from src.app.services.meal_plan_service import MealPlanService
from src.app.services.recipe_generator import RecipeGenerator
from src.app.services.recipe_service import RecipeService
from src.app.services.token_service import CurrentUser, authenticate
from src.services.image_search import BingImageSearchClient
from src.services.openai_client import OpenAIChatClient

logger = logging.getLogger(__name__)

_client: Client | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


auth_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
) -> CurrentUser:
    """
    Recebe Authorization: Bearer <jwt>, valida assinatura e expiração
    e retorna a identidade do usuário (userId, username).
    """
    return authenticate(
        scheme=cred.scheme if cred else None,
        token=cred.credentials if cred else None,
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
    )


@lru_cache(maxsize=1)
def get_storage() -> StorageProvider | None:
    try:
        return R2StorageProvider(
            account_id=settings.R2_ACCOUNT_ID,
            access_key_id=settings.R2_ACCESS_KEY_ID,
            secret_access_key=settings.R2_SECRET_ACCESS_KEY.get_secret_value(),
            bucket_name=settings.R2_BUCKET_NAME,
            public_url=settings.R2_PUBLIC_URL,
        )
    except StorageError as e:
        logger.error("Failed to initialize storage: %s", e)
        return None


def get_default_image() -> StoredImage:
    return StoredImage(url=settings.DEFAULT_IMAGE_URL, storage_ref=settings.DEFAULT_IMAGE_REF)


def get_recipe_repository(supa: Client = Depends(get_supabase)) -> RecipeRepository:
    return SupabaseRecipeRepository(supa)


def get_meal_plan_repository(supa: Client = Depends(get_supabase)) -> MealPlanRepository:
    return SupabaseMealPlanRepository(supa)


def get_recipe_service(
    repo: RecipeRepository = Depends(get_recipe_repository),
    storage: StorageProvider | None = Depends(get_storage),
    default_image: StoredImage = Depends(get_default_image),
) -> RecipeService:
    return RecipeService(repository=repo, storage=storage, default_image=default_image)


def get_meal_plan_service(
    repo: MealPlanRepository = Depends(get_meal_plan_repository),
    recipes: RecipeRepository = Depends(get_recipe_repository),
) -> MealPlanService:
    return MealPlanService(repository=repo, recipe_repository=recipes)


@lru_cache(maxsize=1)
def get_recipe_generator() -> RecipeGenerator:
    llm = OpenAIChatClient(
        api_key=settings.OPENAI_API_KEY.get_secret_value(),
        model_name=settings.OPENAI_MODEL,
        base_url=settings.OPENAI_BASE_URL,
        timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
    )
    images = BingImageSearchClient(
        api_key=settings.BING_IMAGE_SEARCH_API_KEY.get_secret_value(),
        endpoint=settings.BING_IMAGE_SEARCH_URL,
        size=settings.BING_IMAGE_SIZE,
        timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
    )
    return RecipeGenerator(
        llm_client=llm,
        image_search=images,
        temperature=settings.AI_TEMPERATURE,
        max_tokens=settings.AI_MAX_TOKENS,
        require_image=settings.AI_REQUIRE_IMAGE,
    )
