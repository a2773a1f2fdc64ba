"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in production)
    - get_settings() is cached (lru_cache) — single instance per process
    - get_feature_flags() resolves the flag table once, bound to the current environment

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Feature flags as a settings field (JSON in env): injected, not a mutable global
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.domain_types import Environment
from app.core.feature_flags import DEFAULT_FEATURE_FLAGS, FeatureFlags


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://marketplace:marketplace@db:5432/marketplace"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    auth_cookie_name: str = "access_token"
    auth_cookie_secure: bool = False

    # Feature flags
    environment: Environment = Environment.DEVELOPMENT
    feature_flags: dict[str, dict[str, bool]] = DEFAULT_FEATURE_FLAGS

    # Investment files
    file_storage_dir: str = "storage/investment_files"

    # API
    cors_origins: list[str] = ["http://localhost:4321"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_feature_flags() -> FeatureFlags:
    settings = get_settings()
    return FeatureFlags(
        environment=settings.environment, table=settings.feature_flags,
    )
