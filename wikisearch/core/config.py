"""
wikisearch - Application Configuration

Patterns Applied:
- Pydantic Settings with SettingsConfigDict
- Environment variable prefix WIKISEARCH_
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    WIKISEARCH_ prefix.
    Example: WIKISEARCH_INDEX_BACKEND=http, WIKISEARCH_REDIS_URL=redis://cache:6379/0
    """

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8090

    # Application metadata
    service_name: str = "wikisearch"
    version: str = "0.1.0"
    environment: str = "development"

    # Logging configuration
    log_level: str = "INFO"
    log_json: bool = True

    # Index gateway: "redis", "http" or "memory"
    index_backend: str = "redis"
    redis_url: str = "redis://localhost:6379/0"
    index_url: str = "http://localhost:8091"
    index_timeout: float = 10.0
    index_max_retries: int = 3
    index_retry_delay: float = 0.5

    # Query evaluation
    lookup_workers: int = 1
    default_limit: int | None = None

    # Tracing configuration
    tracing_enabled: bool = False
    tracing_console_export: bool = True

    model_config = SettingsConfigDict(
        env_prefix="WIKISEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings instance with values from environment
    """
    return Settings()
