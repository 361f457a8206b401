from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Gateway settings, read from the environment (and .env if present)."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # MongoDB
    mongo_uri: str
    mongo_app_name: str = "Titanico Instance"
    mongo_min_pool_size: int = Field(10, ge=0)
    mongo_max_pool_size: int = Field(500, ge=1)

    # HTTP listener
    host: str = "127.0.0.1"
    port: int = 8080

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text | json

    @model_validator(mode="after")
    def check_pool_bounds(self) -> "Settings":
        if self.mongo_min_pool_size > self.mongo_max_pool_size:
            raise ValueError("MONGO_MIN_POOL_SIZE must not exceed MONGO_MAX_POOL_SIZE")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
