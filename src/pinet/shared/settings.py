from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "BaseEnvSettings",
    "ApiSettings",
    "api_settings",
    "AppSettings",
    "app_settings",
]


class BaseEnvSettings(BaseSettings):
    """Base class for env settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


class ApiSettings(BaseEnvSettings):
    """
    Connection settings for the Pi Network API.

    Holds the base URL every request is resolved against, the per-request
    timeout and the fixed path of the token refresh endpoint.
    """
    base_url: str = Field(
        default="https://api.minepi.com/v2",
        alias="PI_API_BASE_URL",
        description="Base URL of the Pi Network API"
    )

    timeout: float = Field(
        default=10.0,
        alias="PI_API_TIMEOUT",
        description="Per-request timeout in seconds"
    )

    user_agent: str = Field(
        default="Pi-Network-Linux/1.0",
        alias="PI_API_USER_AGENT",
        description="User-Agent header sent with every request"
    )

    refresh_path: str = Field(
        default="/auth/refresh",
        alias="PI_API_REFRESH_PATH",
        description="Path of the token refresh endpoint"
    )

    credentials_path: Optional[str] = Field(
        default=None,
        alias="PI_CREDENTIALS_PATH",
        description="File used to persist credentials between runs"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v):
        """Validate API base URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("API base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("API timeout must be positive")
        return v


class AppSettings(BaseEnvSettings):
    """Application configuration settings."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        description="Logging level to use.",
        alias="LOG_LEVEL",
        default="INFO"
    )


# Initialize settings instances
try:
    api_settings = ApiSettings()
    app_settings = AppSettings()
except Exception as ex:
    print(f"Error loading configuration: {ex}")
    print("Please check your .env file and ensure all required variables are set.")
    raise
