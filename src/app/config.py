from __future__ import annotations

from pydantic import AnyUrl, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IMAGE_URL = (
    "https://res.cloudinary.com/djidbbhk1/image/upload/v1693072469/default_image_lv6ume.png"
)
DEFAULT_IMAGE_REF = "default_image_lv6ume"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
    )

    JWT_SECRET: SecretStr
    JWT_ALGORITHM: str = "HS256"

    OPENAI_API_KEY: SecretStr
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    AI_TEMPERATURE: float = 0.4
    AI_MAX_TOKENS: int = Field(default=750, ge=1, le=4096)
    # false: a failed image lookup yields image="" instead of failing the request
    AI_REQUIRE_IMAGE: bool = True

    BING_IMAGE_SEARCH_API_KEY: SecretStr
    BING_IMAGE_SEARCH_URL: str = "https://api.bing.microsoft.com/v7.0/images/search"
    BING_IMAGE_SIZE: str = "medium"

    HTTP_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    R2_ACCOUNT_ID: str = ""
    R2_ACCESS_KEY_ID: str = ""
    R2_SECRET_ACCESS_KEY: SecretStr = SecretStr("")
    R2_BUCKET_NAME: str = ""
    R2_PUBLIC_URL: str = ""

    DEFAULT_IMAGE_URL: str = DEFAULT_IMAGE_URL
    DEFAULT_IMAGE_REF: str = DEFAULT_IMAGE_REF

    UPLOAD_TEMP_DIR: str = "/tmp/recipe-uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    @field_validator("AI_TEMPERATURE")
    @classmethod
    def _temperature_in_band(cls, value: float) -> float:
        if not 0.3 <= value <= 0.4:
            raise ValueError("AI_TEMPERATURE must be between 0.3 and 0.4")
        return value


settings = Settings()
