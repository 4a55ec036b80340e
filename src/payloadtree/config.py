from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Normalizer settings loaded from environment variables with PAYLOADTREE_ prefix."""

    # Top-level wrapper key unwrapped before the document is read
    envelope_key: str = "_jsonapi"
    # Logging
    warn_unknown_methods: bool = True
    log_unresolved: bool = False

    model_config = SettingsConfigDict(env_prefix="PAYLOADTREE_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
