from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SECRET_KEY (JWT signing secret)

    Optional:
      - DATABASE_URL (defaults to a local SQLite file)
      - UPLOAD_DIR (where transcoded product images are written)
    """

    PROJECT_NAME: str = "Shop Admin API"
    API_V1_STR: str = "/api/v1"

    # Store
    DATABASE_URL: str = "sqlite:///./shop.db"

    # JWT signing / verification
    SECRET_KEY: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Public static uploads
    UPLOAD_DIR: str = "public/uploads"
    UPLOAD_URL_PATH: str = "/public/uploads"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
