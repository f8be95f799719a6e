# skinfetch/core/config.py
from dotenv import find_dotenv, load_dotenv
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SERVER_URL = (
    "https://sessionserver.mojang.com/session/minecraft/profile/"
)


class AppConfig(BaseSettings):
    """
    Application configuration loaded from environment variables.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Cache Configuration
    cache_max_size: int = Field(
        default=1000, description="Maximum number of cached texture records"
    )
    cache_ttl_seconds: int = Field(
        default=1800,
        description="Sliding expiry window in seconds, measured from last access",
    )

    # Session Server Configuration
    session_server_url: str = Field(
        default=DEFAULT_SESSION_SERVER_URL,
        description="Profile endpoint, the undashed UUID is appended to it",
    )
    request_timeout: float = Field(
        default=10.0, description="Total timeout for one profile request in seconds"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Optional log file")

    @field_validator("cache_max_size")
    @classmethod
    def validate_cache_max_size(cls, value):
        if value <= 0:
            raise ValueError("Cache max size must be a positive integer.")
        return value

    @field_validator("cache_ttl_seconds")
    @classmethod
    def validate_cache_ttl_seconds(cls, value):
        if value < 1:
            raise ValueError("Cache TTL must be at least one second.")
        return value

    @field_validator("session_server_url")
    @classmethod
    def validate_session_server_url(cls, value):
        if not value.endswith("/"):
            raise ValueError("Session server URL must end with '/'.")
        return value

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, value):
        if value <= 0:
            raise ValueError("Request timeout must be positive.")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value):
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if value.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of: {', '.join(allowed_levels)}")
        return value.upper()

    def __repr__(self):
        return f"<AppConfig: {', '.join([f'{k}={v}' for k, v in self.model_dump().items()])}>"

    def __str__(self):
        return self.__repr__()


def load_config(**overrides) -> AppConfig:
    """Load and return the application configuration."""
    load_dotenv(find_dotenv(usecwd=True))
    return AppConfig(**overrides)


__all__ = ["AppConfig", "DEFAULT_SESSION_SERVER_URL", "load_config"]
