# Pydantic settings

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import os


class Settings(BaseSettings):
    """Application settings"""

    # App
    app_name: str = "Analytics Engine"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    store_prefix: str = Field(
        default="analyticsEngine",
        min_length=1,
        validation_alias=AliasChoices("store_prefix", "redis_key"),
    )

    # Retention applied to a partition on every append (days)
    max_age_days: int = Field(..., gt=0, validation_alias=AliasChoices("max_age_days", "max_age"))

    # Shared secret expected in the Authorization header
    api_auth: str = Field(..., min_length=1)

    model_config = SettingsConfigDict(
        # Use .env.local if it exists (for local dev), otherwise .env (for Docker)
        env_file=".env.local" if os.path.exists(".env.local") else ".env",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
