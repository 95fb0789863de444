"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed application configuration.

    Provider credentials are optional here; handlers check for them on every
    request so a missing key surfaces as an error response, not a failed boot.
    """

    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    replicate_api_token: str | None = Field(default=None, alias="REPLICATE_API_TOKEN")
    chat_model: str = Field(default="gpt-3.5-turbo", alias="CHAT_MODEL")
    chat_max_tokens: int = Field(default=150, alias="CHAT_MAX_TOKENS")
    caption_model_version: str | None = Field(
        default=None,
        alias="CAPTION_MODEL_VERSION",
        description="Either 'owner/name:version' or a bare version id.",
    )
    caption_task: str = Field(default="image_captioning", alias="CAPTION_TASK")
    max_image_bytes: int = Field(default=1_000_000, alias="MAX_IMAGE_BYTES")
    http_timeout: float = Field(default=60.0, alias="HTTP_TIMEOUT", description="Seconds")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, populate_by_name=True, extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of settings."""

    return Settings()
