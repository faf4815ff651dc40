from functools import lru_cache
from typing import Literal
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Add new settings here following this pattern:
    - Use type hints
    - Provide sensible defaults for optional settings
    - Use SecretStr for sensitive values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Admin Service"
    app_version: str = "0.1.0"
    environment: Literal["local", "test", "dev", "staging", "prod"] = "local"
    debug: bool = False
    server_name: str = "Insomnia"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: SecretStr | None = None
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo_sql: bool = False
    # e.g. "REPEATABLE READ" so paginated data/count pairs share a snapshot
    db_isolation_level: str | None = None

    # Redis (optional - falls back to the in-memory cache)
    redis_url: SecretStr | None = None
    redis_max_connections: int = 10

    # Response cache
    cache_enabled: bool = True
    cache_ttl: int = 300  # seconds (5 minutes)
    cache_max_entries: int = 1000
    cache_key_prefix: str = "admin_service"
    cache_invalidation_strategy: Literal["version", "scan"] = "version"

    # Pagination
    items_per_page: int = 20
    pagination_max_items_per_page: int = 100

    # Files owned by the "file" resource
    files_path: str = "files"

    # Observability
    log_level: int = 20  # INFO by default (DEBUG=10, INFO=20, WARNING=30, ERROR=40)
    log_format: Literal["json", "console"] = "json"
    log_sensitive_keys: list[str] = Field(
        default_factory=lambda: ["password", "accessToken", "refreshToken"]
    )
    request_log_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
