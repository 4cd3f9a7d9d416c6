# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - DATABASE_URL (Postgres connection string holding the kv_store table)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY (only used for sign-up via the admin client)
    """

    PROJECT_NAME: str = "Community Backend"
    API_V1_STR: str = "/api/v1"

    # Supabase / DB config
    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # Record store
    KV_TABLE_NAME: str = "kv_store"

    # Community rules
    DEFAULT_AUTH_CODES: list[str] = ["SILL2025", "OWNER123", "ADMIN456"]
    JOIN_CODE_LENGTH: int = 8
    JOIN_CODE_DEFAULT_EXPIRY_DAYS: int = 7
    JOIN_CODE_MAX_EXPIRY_DAYS: int = 365
    ANNOUNCEMENT_LIMIT: int = 50
    ALLOW_COMMUNITY_SWITCH: bool = False

    CORS_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
