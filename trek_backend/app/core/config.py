"""
Configuration settings for the Ronins Trek Backend.

This module handles application configuration using Pydantic settings.
Database credentials, the JWT signing secret and the admin password are
required: a missing value makes ``Settings()`` raise at import time, which
stops the server before it accepts any request.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Ronins Trek Backend"
    api_prefix: str = "/api"
    debug: bool = False
    log_level: str = "INFO"

    # Database Configuration (required)
    db_host: str
    db_user: str
    db_password: str
    db_name: str
    db_port: int = 5432

    # Full SQLAlchemy URL, overrides the DB_* parts when set
    database_url: Optional[str] = None
    db_echo: bool = False
    db_pool_size: int = 20
    db_max_overflow: int = 10

    # Security Configuration (required)
    jwt_secret: str
    admin_password: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 600

    # Login throttling (attempts per window, per client address)
    login_rate_limit: int = 5
    login_rate_window_seconds: int = 15 * 60

    # Global throttling of every route (requests per window, per client address)
    request_rate_limit: int = 100
    request_rate_window_seconds: int = 15 * 60

    # Files
    gallery_path: str = "data/gallery.json"
    static_dir: str = "public"

    # CORS allow-list
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://localhost:3003",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:3001",
        "http://127.0.0.1:3003",
    ]

    # Seed value for the driver panel password (scripts/setup_database.py)
    default_driver_password: Optional[str] = None

    @field_validator("database_url", "default_driver_password", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        if v in ("", None):
            return None
        return v

    @property
    def sqlalchemy_database_url(self) -> str:
        """Async SQLAlchemy URL for the configured database."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.sqlalchemy_database_url.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
