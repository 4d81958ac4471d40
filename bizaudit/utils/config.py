"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Claude API (optional - template reports are used without it)
    ANTHROPIC_API_KEY: Optional[str] = None
    CLAUDE_MODEL: str = "claude-haiku-4-5-20251001"
    CLAUDE_MAX_TOKENS: int = 4096
    CLAUDE_SDK_MAX_RETRIES: int = 1

    # Rate limiting (in-process counters when REDIS_URL is unset)
    REDIS_URL: Optional[str] = None
    RATE_LIMIT_EMAIL_MAX: int = 3
    RATE_LIMIT_IP_MAX: int = 10
    RATE_LIMIT_WINDOW_HOURS: int = 24
    RATE_LIMIT_EMAIL_PREFIX: str = "bizaudit:email"
    RATE_LIMIT_IP_PREFIX: str = "bizaudit:ip"

    # Report timing
    MIN_WAIT_SECONDS: float = 8.0
    POLL_INTERVAL_SECONDS: float = 4.0
    POLL_TIMEOUT_SECONDS: float = 90.0

    # In-memory report sessions are dropped after this long without a state change
    SESSION_TTL_SECONDS: float = 3600.0

    # Notifications (optional)
    RESEND_API_KEY: Optional[str] = None
    ADMIN_EMAIL: Optional[str] = None
    FROM_EMAIL: str = "BizAudit <reports@bizaudit.dev>"
    REPORT_BASE_URL: str = "https://bizaudit.dev/report"

    # Remote read path
    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT: int = 30

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
