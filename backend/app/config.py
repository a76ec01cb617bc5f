"""Application configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Portfolio persistence
    storage_backend: Literal["redis", "file"] = "redis"
    portfolio_key: str = "portfolio"
    portfolio_file: Path = Path("portfolio.json")

    # Market data
    history_period: str = "6mo"
    history_interval: str = "1d"
    fetch_timeout_seconds: float = 10.0
    provider_calls_per_minute: int = 120

    # Buy screener watchlist (Tokyo Stock Exchange large caps)
    watchlist: list[str] = [
        "7203.T", "9984.T", "6758.T", "6861.T", "8306.T", "6367.T",
        "9983.T", "4502.T", "9432.T", "9433.T", "4503.T", "6369.T",
        "8308.T", "6368.T", "8309.T", "6366.T",
    ]

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
