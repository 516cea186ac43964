from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = False

    # Application
    app_name: str = "URL Shortener Microservice"
    app_version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Database (URL registry and, with the "database" backend, counters)
    database_url: str = "sqlite+aiosqlite:///./urlshortener.db"

    # Sequence allocation
    sequence_backend: str = "database"  # Options: "database", "redis"
    redis_url: str = "redis://localhost:6379/0"
    counter_name: str = "url_count"

    # HTTP
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
