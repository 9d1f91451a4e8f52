"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Centralised settings — no hardcoded values anywhere else."""

    # Storage
    storage_backend: Literal["memory", "sql"] = Field("memory", env="STORAGE_BACKEND")
    database_url: str = Field(
        "sqlite+aiosqlite:///./localgourmet.db", env="DATABASE_URL"
    )

    # HTTP
    api_prefix: str = Field("/api", env="API_PREFIX")
    owner_token_header: str = Field("X-User-Cookie", env="OWNER_TOKEN_HEADER")
    allowed_origins: str = Field(
        "http://localhost:5000,http://localhost:5173",
        env="ALLOWED_ORIGINS",
    )

    # App
    app_env: str = Field("development", env="APP_ENV")
    log_level: str = Field("INFO", env="LOG_LEVEL")

    # Rating stats cache; cached values always equal a fresh computation
    stats_cache_enabled: bool = Field(False, env="STATS_CACHE_ENABLED")
    stats_cache_ttl: int = Field(300, env="STATS_CACHE_TTL")
    stats_cache_size: int = Field(1024, env="STATS_CACHE_SIZE")

    # Demo data
    seed_on_startup: bool = Field(False, env="SEED_ON_STARTUP")
    seed_file: str = Field("data/seed_restaurants.csv", env="SEED_FILE")

    # Derived
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
