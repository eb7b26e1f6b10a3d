"""Application configuration using Pydantic Settings.

This project loads configuration from environment variables.

Optionally, you may point `ENV_FILE` at a local env file (for development).
Values already present in the environment take precedence over the file.
"""

import os
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnvironment(str, Enum):
    """Application environment values."""

    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


class Settings(BaseSettings):
    """
    Application settings with type validation.

    Configuration is loaded from environment variables, with support
    for .env files in development.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="", extra="ignore"
    )

    # Application
    app_env: AppEnvironment = AppEnvironment.LOCAL
    app_name: str = "donations-core"
    app_log_level: str = "INFO"

    # Observability
    observability_structured_logs: bool = True

    # Document store
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "donations"
    mongodb_server_selection_timeout_ms: int = 5000

    # Identifier allocation: attempts before a collision streak becomes fatal
    identifier_max_attempts: int = Field(default=5, ge=1, le=20)

    # Guarded writes: reloads after losing to a concurrent mutation of the same entity
    write_max_attempts: int = Field(default=5, ge=1, le=20)

    @field_validator("app_env", mode="before")
    @classmethod
    def validate_app_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        """Validate and parse app_env to AppEnvironment enum."""
        if isinstance(v, AppEnvironment):
            return v
        try:
            return AppEnvironment(v.lower())
        except ValueError:
            raise ValueError(
                f"app_env must be one of {[e.value for e in AppEnvironment]}, got '{v}'"
            )

    @field_validator("mongodb_url")
    @classmethod
    def validate_mongodb_url(cls, v: str) -> str:
        """Validate the MongoDB connection string scheme."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("mongodb_url must use mongodb:// or mongodb+srv:// scheme")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """
        Validate production-specific settings.

        These checks prevent insecure configurations from being deployed to production.
        """
        if self.app_env == AppEnvironment.PROD:
            if "localhost" in self.mongodb_url or "127.0.0.1" in self.mongodb_url:
                raise ValueError("MONGODB_URL must not point at localhost in production")

        return self


settings = Settings()
