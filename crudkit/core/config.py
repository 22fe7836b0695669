"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support and nested sections (DATABASE__PROVIDER,
REDIS__CONNECTION_STRING, ...). The database provider and connection
string are validated at load time; a bad value is fatal at startup.
"""

from functools import lru_cache

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_PROVIDERS: tuple[str, ...] = ("postgres", "sqlite")


class DatabaseSettings(BaseModel):
    """Database section. connection_string falls back to ConnectionStrings.DefaultConnection."""

    provider: str = "postgres"
    connection_string: str | None = None
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    # Transient connectivity errors are retried this many times in total.
    retry_attempts: int = 3
    retry_max_wait: float = 5.0


class ConnectionStringsSettings(BaseModel):
    """ConnectionStrings section (fallback for Database.ConnectionString)."""

    default_connection: str | None = None


class RedisSettings(BaseModel):
    """Redis cache section."""

    enabled: bool = True
    connection_string: str = "redis://localhost:6379/0"
    default_ttl: int = 300
    socket_timeout: float = 2.0
    reconnect_max_delay: float = 30.0


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "crudkit"
    app_version: str = "1.0.0"
    debug: bool = False

    # Security
    bcrypt_rounds: int = 12

    database: DatabaseSettings = DatabaseSettings()
    connection_strings: ConnectionStringsSettings = ConnectionStringsSettings()
    redis: RedisSettings = RedisSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_database(self) -> "Settings":
        """Validate provider and resolve the connection string.

        - Provider must be one of SUPPORTED_PROVIDERS (case-insensitive).
        - Database.ConnectionString, else ConnectionStrings.DefaultConnection, is required.
        """
        provider = self.database.provider.strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unsupported database provider: {self.database.provider!r}. "
                f"Supported providers are: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        self.database.provider = provider
        if not self.database_connection_string:
            raise ValueError(
                "Database connection string is not configured. Set either "
                "DATABASE__CONNECTION_STRING or CONNECTION_STRINGS__DEFAULT_CONNECTION."
            )
        return self

    @property
    def database_connection_string(self) -> str | None:
        """Database.ConnectionString, falling back to ConnectionStrings.DefaultConnection."""
        return self.database.connection_string or self.connection_strings.default_connection


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
