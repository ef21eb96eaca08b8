"""
Application configuration loaded from environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """MTC API server configuration."""

    model_config = SettingsConfigDict(env_prefix="MTC_", env_file=".env", extra="ignore")

    environment: Literal["dev", "staging", "prod"] = "dev"

    # Database
    database_url: str = "sqlite+aiosqlite:///./mtc.db"

    # Security
    secret_key: str = "mtc-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7
    bcrypt_rounds: int = 12

    # Catalog
    seed_projects: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False

    # Logging
    log_level: str = "info"
    log_format: Literal["json", "text"] = "json"

    # CORS
    cors_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
