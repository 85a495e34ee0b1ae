"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the catalog/identity contracts

Collaborators:
  - api/main.py: reads settings for CORS, pool and startup validation
  - container.py: builds token issuer, cache and repositories from settings
  - interfaces/api/http/routers: read catalog paging limits

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration
  - Read-only after startup (singleton)

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string
        redis_url: Redis connection string for the product cache (optional)
        app_env: Application environment (development/production/test)
        log_level: Root log level (default: INFO)
        log_json: Emit JSON logs (default: True)
        allowed_origins: Comma-separated CORS origins
        jwt_secret: Secret for signing JWT access tokens
        jwt_issuer: Expected/emitted `iss` claim
        jwt_audience: Expected/emitted `aud` claim
        jwt_access_ttl_minutes: Access token lifetime in minutes
        product_cache_ttl_seconds: TTL for cached product snapshots (default: 30 min)
        product_cache_max_entries: Max entries for the in-memory cache backend
        catalog_default_take: Default page size for product listings
        catalog_max_take: Upper bound for page size
        password_min_length: Minimum password length on registration
    """

    # Required (no defaults)
    database_url: str = ""

    # Environment
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"

    # Redis (cache de productos). Vacío => backend in-memory.
    redis_url: str = ""

    # Security - JWT Auth
    jwt_secret: str = "dev-secret"
    jwt_issuer: str = "techmart-identity"
    jwt_audience: str = "techmart-clients"
    jwt_access_ttl_minutes: int = 60

    # Password policy
    password_min_length: int = 8

    # Catalog
    product_cache_ttl_seconds: int = 30 * 60
    product_cache_max_entries: int = 10_000
    catalog_default_take: int = 20
    catalog_max_take: int = 100

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    @field_validator("jwt_access_ttl_minutes", "product_cache_ttl_seconds")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("password_min_length")
    @classmethod
    def password_min_length_valid(cls, v: int) -> int:
        if v < 1:
            raise ValueError("password_min_length must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_catalog_paging(self):
        if self.catalog_default_take <= 0:
            raise ValueError("catalog_default_take must be greater than 0")
        if self.catalog_max_take < self.catalog_default_take:
            raise ValueError("catalog_max_take must be >= catalog_default_take")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        insecure_secrets = {"dev-secret", "changeme", "change-me", "password"}
        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in insecure_secrets:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        if not self.database_url.strip():
            raise ValueError("DATABASE_URL is required in production")

        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in {"test", "testing", "ci"}

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
        frozen=True,
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
