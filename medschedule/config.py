"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    # Application
    app_name: str = Field(default="Medical Scheduler", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Storage
    storage_backend: str = Field(
        default="memory",
        alias="STORAGE_BACKEND",
        pattern="^(memory|redis)$",
        description="Record store backend",
    )
    storage_key_prefix: str = Field(default="@MedicalApp:", alias="STORAGE_KEY_PREFIX")

    # Redis
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_username: str = Field(default="default", alias="REDIS_USERNAME")
    redis_password: str = Field(default="", alias="REDIS_PASSWORD")
    redis_db: int = Field(default=0, alias="REDIS_DB")

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        pattern="(?i)^(debug|info|warning|error|critical)$",
    )
    log_format: str = Field(
        default="auto",
        alias="LOG_FORMAT",
        pattern="^(auto|json|console)$",
        description="auto renders to the console in development and JSON elsewhere",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
