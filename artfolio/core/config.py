"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here.
"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for upload endpoints.
        storage_backend: Which storage adapter backs the data-access layer.
        file_hosting_backend: Where uploaded files are published.
        user_id_header: Request header carrying the authenticated user id.
        my_portfolio_alias: Reserved path alias for "my own portfolio".
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "Artfolio"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    # --- Storage ---
    storage_backend: Literal["memory", "sql", "table_store"] = "memory"
    seed_demo_user: bool = False

    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "artfolio"
    sql_echo: bool = False

    table_store_url: Optional[str] = None
    table_store_api_key: Optional[str] = None
    table_store_timeout_seconds: float = 10.0

    # --- File hosting ---
    file_hosting_backend: Literal["local", "http"] = "local"
    upload_dir: str = "uploads"
    public_upload_base_url: str = "/uploads"
    file_host_url: Optional[str] = None
    file_host_api_key: Optional[str] = None
    file_host_timeout_seconds: float = 30.0
    max_upload_size_bytes: int = 16 * 1024 * 1024  # 16 MB
    allowed_image_types: tuple[str, ...] = (
        "image/png",
        "image/jpeg",
        "image/webp",
        "image/gif",
    )

    # --- Identity ---
    user_id_header: str = "X-User-Id"
    dev_user_id: Optional[str] = None

    # --- Portfolios ---
    my_portfolio_alias: str = "my-portfolio"
    slug_suffix_length: int = 6
    slug_retry_attempts: int = 3

    def get_database_url(self) -> str:
        """Return the effective SQLAlchemy URL for the SQL backend.

        Priority:
        1. Explicit `DATABASE_URL`
        2. Build a PostgreSQL DSN from postgres_* values (Docker Compose, local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
