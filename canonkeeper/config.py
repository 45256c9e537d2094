from __future__ import annotations

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    app_name: str = "Canonkeeper"
    # Default to a local postgres database if not set in env
    database_url: str = "postgresql+asyncpg://localhost/canonkeeper"
    database_echo: bool = False

    # Upper bound for a single engine operation (read or write), in seconds
    store_timeout_seconds: float = 10.0

    # Retry settings for transient store failures (ConflictRetryable)
    store_max_attempts: int = 3
    store_retry_base_delay: float = 0.2  # seconds, used with exponential backoff
    store_retry_max_delay: float = 2.0

    log_file: str = "server.log"
    log_level: str = "INFO"

    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CANONKEEPER_", extra="ignore")

@lru_cache
def get_settings():
    return Settings()
