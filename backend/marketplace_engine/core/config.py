"""
Engine configuration settings.

Defaults cover everything the engine needs; any value may be overridden
through ``MARKETPLACE_*`` environment variables or by passing an explicit
``Settings`` instance to the services.
"""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Marketplace engine settings loaded from environment variables."""

    # Logging
    debug: bool = False
    log_level: str = "INFO"

    # Auctions
    default_bid_increment: float = 5.0
    default_extension_minutes: int = 5
    active_auctions_limit: int = 20

    # Discovery
    featured_limit: int = 10
    trending_limit: int = 10
    similar_limit: int = 6
    max_page_size: int = 100

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        return str(v).upper()

    @field_validator("default_bid_increment")
    @classmethod
    def positive_increment(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("default_bid_increment must be positive")
        return v

    class Config:
        env_prefix = "MARKETPLACE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
