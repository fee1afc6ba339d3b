"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from backend.settings import get_settings, Settings

    # In FastAPI endpoints (dependency injection)
    @app.get("/")
    def read_root(settings: Settings = Depends(get_settings)):
        return {"environment": settings.environment}

    # Direct access (module-level)
    settings = get_settings()
    print(settings.supabase_url)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production, test",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level applied by create_app()",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anonymous key (limited access)",
    )
    supabase_jwt_secret: Optional[str] = Field(
        default=None,
        description="Secret used to verify Supabase access tokens (HS256)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the best available Supabase key (service role preferred)."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # -------------------------------------------------------------------------
    # Authentication - API keys
    # -------------------------------------------------------------------------
    api_keys: str = Field(
        default="",
        description="Comma-separated list of valid API keys",
    )

    @property
    def api_keys_list(self) -> list[str]:
        """Parse API keys into a list."""
        return [k.strip() for k in self.api_keys.split(",") if k.strip()]

    # -------------------------------------------------------------------------
    # External Services - Open Food Facts
    # -------------------------------------------------------------------------
    open_food_facts_url: str = Field(
        default="https://world.openfoodfacts.org",
        description="Base URL of the Open Food Facts API",
    )
    open_food_facts_timeout: float = Field(
        default=5.0,
        description="Upstream request timeout in seconds",
    )
    open_food_facts_user_agent: str = Field(
        default="HeavyGym - API - Version 1.0 - https://heavygym.app",
        description="User-Agent sent to Open Food Facts (required by their usage policy)",
    )

    # -------------------------------------------------------------------------
    # Food Search
    # -------------------------------------------------------------------------
    food_search_cache_ttl_seconds: int = Field(
        default=300,
        description="How long product name searches stay cached",
    )
    food_search_max_attempts: int = Field(
        default=2,
        description="Attempts for a product name search before giving up",
    )

    # -------------------------------------------------------------------------
    # Workout Draft Storage
    # -------------------------------------------------------------------------
    draft_storage_dir: str = Field(
        default="./data/drafts",
        description="Directory holding persisted workout drafts",
    )
    draft_storage_namespace: str = Field(
        default="workout-draft-storage",
        description="Storage key prefix for workout drafts",
    )

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------
    macro_goals_webhook_url: Optional[str] = Field(
        default=None,
        description="Optional webhook notified whenever macro goals are saved",
    )

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------
    cors_allowed_origins: str = Field(
        default="",
        description="Comma-separated list of extra trusted CORS origins",
    )

    @property
    def cors_allowed_origins_list(self) -> list[str]:
        """Parse trusted CORS origins into a list."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(
                f"Invalid log_level '{v}'. Must be one of: {valid_levels}"
            )
        return v.upper()

    @field_validator("food_search_max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        """At least one attempt is required for the search loop to run."""
        if v < 1:
            raise ValueError(f"food_search_max_attempts must be >= 1, got {v}")
        return v

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
