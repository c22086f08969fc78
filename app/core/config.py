"""Application settings and configuration."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables (and `.env` when present)."""

    # Database
    DATABASE_URL: str = Field(
        default="sqlite:///./quizzes.db",
        description="SQLAlchemy database URL",
    )
    DB_POOL_SIZE: int = Field(default=20, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)

    # Auth
    SECRET_KEY: str = Field(
        default="development-secret-key-change-me",
        description="Key used to sign JWT access and refresh tokens",
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=90, ge=1)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=7, ge=1)

    # Default admin account, created at startup when both are set
    ADMIN_NAME: str = "Administrator"
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
