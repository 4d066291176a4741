from pydantic_settings import BaseSettings
from pydantic import field_validator
from functools import lru_cache
from typing import Optional, List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Portfolio Backend"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./portfolio.db"
    DATABASE_ECHO: bool = False
    USE_ALEMBIC: bool = False  # True in production: `alembic upgrade head` owns the schema

    # Auth cookie (single admin password, unset = open access for local dev)
    ADMIN_PASSWORD: Optional[str] = None
    AUTH_COOKIE_NAME: str = "auth_token"
    AUTH_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 7
    AUTH_COOKIE_SECURE: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Reporting
    TIMEZONE: str = "UTC"
    UPCOMING_EXPIRY_DAYS: int = 30
    TOP_PROJECTS_LIMIT: int = 5

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def convert_database_url(cls, v: str) -> str:
        """Convert postgresql:// to postgresql+asyncpg:// for async support."""
        if v and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
