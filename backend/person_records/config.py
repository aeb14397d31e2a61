"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from person_records.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables with validation."""

    # Database
    mongo_uri: str = Field(..., description="MongoDB connection string")
    mongo_database: str = Field(
        default="",
        description="Database name; derived from the URI path when empty",
    )
    server_selection_timeout_ms: int = Field(
        default=5000,
        description="How long the driver waits for a reachable server",
    )
    reset_collection: bool = Field(
        default=False,
        description="Delete all people before running the scenario",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Observability
    logfire_token: str = Field(default="", description="Logfire observability token")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("mongo_uri")
    @classmethod
    def validate_mongo_uri(cls, v: str) -> str:
        """Validate that the connection string is provided."""
        if not v.strip():
            raise ValueError("MONGO_URI cannot be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level


def load_settings(**overrides) -> Settings:
    """Build Settings, turning validation failures into ConfigurationError."""
    try:
        return Settings(**overrides)
    except PydanticValidationError as e:
        missing = [
            str(err["loc"][0]).upper()
            for err in e.errors()
            if err["type"] == "missing" and err["loc"]
        ]
        if missing:
            message = (
                f"{', '.join(missing)} is not defined. "
                "Please check your environment or .env file."
            )
        else:
            message = f"Invalid configuration: {e}"
        raise ConfigurationError(message, operation="load_settings") from e


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    return load_settings()
