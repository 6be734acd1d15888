"""
Application configuration using Pydantic Settings
"""
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "JobBoard API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Shared secret for write routes; open when unset
    API_KEY: Optional[str] = None

    # Database
    DATABASE_URL: str = "sqlite:///./jobboard.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20

    # Greenhouse job board API
    GREENHOUSE_API_BASE_URL: str = "https://boards-api.greenhouse.io/v1"
    GREENHOUSE_TIMEOUT_SECONDS: float = 20.0
    GREENHOUSE_BOARD_TOKENS: List[str] = []  # Boards synced by the beat schedule
    SYNC_INTERVAL_MINUTES: int = 0  # 0 disables the periodic sync
    SYNC_DEACTIVATE_MISSING: bool = True

    # Normalization
    JOB_EXPIRY_DAYS: int = Field(default=30, ge=1)
    SALARY_PLACEHOLDER: str = "Competitive"

    # Redis (preview cache)
    REDIS_URL: str = "redis://localhost:6379/0"
    PREVIEW_CACHE_ENABLED: bool = True
    PREVIEW_CACHE_TTL: int = 300

    # Async Tasks
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/2"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    CORS_ALLOW_CREDENTIALS: bool = True

    # Observability
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
