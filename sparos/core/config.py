"""Configuration settings for the Sparos backend."""

from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Bungie.net Platform API
    bungie_api_key: str = Field(default="", description="Bungie.net API key")
    bungie_api_base_url: str = Field(
        default="https://www.bungie.net/Platform",
        description="Base URL of the Bungie.net Platform API",
    )
    bungie_request_timeout: float = Field(
        default=25.0, description="Read timeout for Bungie API requests in seconds"
    )

    # Application Configuration
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # CORS Configuration
    cors_origins: str = Field(default="http://localhost:3000,http://127.0.0.1:3000")

    # Search pipeline
    job_store_path: str = Field(
        default="",
        description="JSON file holding the in-flight search job (empty = in memory)",
    )
    restore_job_on_startup: bool = Field(default=True)

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [
            origin.strip() for origin in self.cors_origins.split(",") if origin.strip()
        ]

    @property
    def environment(self) -> str:
        """Get current environment from ENVIRONMENT variable."""
        env = os.getenv("ENVIRONMENT", "").lower()
        return env if env in ["dev", "production"] else "dev"

    @field_validator("bungie_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths start with a slash, so the base URL must not end with one."""
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Reject log levels the logging module does not know."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


# Create a global settings instance lazily
settings: Settings | None = None


def get_global_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
