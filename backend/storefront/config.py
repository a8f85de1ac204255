from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./storefront.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    SECRET_KEY: str = "change-this-secret"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    FRONTEND_ORIGINS: List[str] = ["http://localhost:5173"]
    LOG_LEVEL: str = "INFO"

    # drop & recreate tables on startup / insert the sample catalogue
    RESET_DB: bool = False
    SEED_DB: bool = False

    # catalogue listing
    DEFAULT_PAGE_SIZE: int = 12
    MAX_PAGE_SIZE: int = 100

    # Off by default: stock check and cart write are not atomic, concurrent
    # adds for the same user/product may overcommit. When on, every cart
    # mutation holds a file lock keyed by (user, product).
    CART_SERIALIZE_MUTATIONS: bool = False
    CART_LOCK_TIMEOUT_SECONDS: float = 10.0
    LOCK_DIR: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
