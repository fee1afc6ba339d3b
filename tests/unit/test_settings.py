"""
Unit tests for backend/settings.py
"""

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings


# Environment variables that CI might set which we need to clear for default tests
CI_ENV_VARS = [
    "ENVIRONMENT",
    "LOG_LEVEL",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_ANON_KEY",
    "SUPABASE_JWT_SECRET",
    "API_KEYS",
    "MACRO_GOALS_WEBHOOK_URL",
    "SENTRY_DSN",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear CI environment variables to test true defaults."""
    for var in CI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test that Settings applies correct defaults."""

    def test_environment_default(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.environment == "development"
        assert settings.log_level == "INFO"

    def test_supabase_fields_default_to_none(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.supabase_url is None
        assert settings.supabase_service_role_key is None
        assert settings.supabase_anon_key is None
        assert settings.supabase_jwt_secret is None

    def test_open_food_facts_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.open_food_facts_url == "https://world.openfoodfacts.org"
        assert settings.open_food_facts_timeout == 5.0
        assert settings.open_food_facts_user_agent.startswith("HeavyGym")

    def test_food_search_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.food_search_cache_ttl_seconds == 300
        assert settings.food_search_max_attempts == 2

    def test_draft_storage_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.draft_storage_namespace == "workout-draft-storage"
        assert settings.draft_storage_dir == "./data/drafts"

    def test_optional_integrations_default_to_none(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.macro_goals_webhook_url is None
        assert settings.sentry_dsn is None


@pytest.mark.unit
class TestSettingsValidation:
    """Test Settings validation behavior."""

    def test_valid_environments_accepted(self):
        for env in ["development", "staging", "production", "test"]:
            settings = Settings(environment=env)
            assert settings.environment == env

    def test_environment_case_insensitive(self):
        settings = Settings(environment="PRODUCTION")
        assert settings.environment == "production"

    def test_invalid_environment_raises_error(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(environment="invalid")
        assert "Invalid environment" in str(exc_info.value)

    def test_log_level_is_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_raises_error(self):
        with pytest.raises(ValidationError):
            Settings(log_level="loud")

    def test_zero_attempts_rejected(self):
        with pytest.raises(ValidationError):
            Settings(food_search_max_attempts=0)


@pytest.mark.unit
class TestSettingsProperties:
    """Test Settings computed properties."""

    def test_supabase_key_prefers_service_role(self, clean_env):
        settings = Settings(
            _env_file=None,
            supabase_service_role_key="service-key",
            supabase_anon_key="anon-key",
        )
        assert settings.supabase_key == "service-key"

    def test_supabase_key_falls_back_to_anon(self, clean_env):
        settings = Settings(_env_file=None, supabase_anon_key="anon-key")
        assert settings.supabase_key == "anon-key"

    def test_supabase_key_returns_none_if_neither(self, clean_env):
        assert Settings(_env_file=None).supabase_key is None

    def test_api_keys_list_strips_whitespace(self):
        settings = Settings(api_keys="  key1  ,  key2:user-1  ,")
        assert settings.api_keys_list == ["key1", "key2:user-1"]

    def test_api_keys_list_handles_empty(self):
        assert Settings(api_keys="").api_keys_list == []

    def test_cors_origins_list(self):
        settings = Settings(cors_allowed_origins="https://app.heavygym.se, https://admin.heavygym.se")
        assert settings.cors_allowed_origins_list == [
            "https://app.heavygym.se",
            "https://admin.heavygym.se",
        ]

    def test_environment_flags(self):
        assert Settings(environment="production").is_production is True
        assert Settings(environment="development").is_development is True
        assert Settings(environment="test").is_test is True
        assert Settings(environment="staging").is_production is False


@pytest.mark.unit
class TestGetSettings:
    """Test get_settings() function."""

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert isinstance(settings1, Settings)
        assert settings1 is settings2

    def test_get_settings_cache_can_be_cleared(self, monkeypatch):
        get_settings.cache_clear()
        get_settings()
        monkeypatch.setenv("FOOD_SEARCH_MAX_ATTEMPTS", "4")
        get_settings.cache_clear()
        assert get_settings().food_search_max_attempts == 4
        get_settings.cache_clear()


@pytest.mark.unit
class TestSettingsFromEnv:
    """Test Settings loading from environment variables."""

    def test_settings_loads_from_env(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")
        monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
        monkeypatch.setenv("SUPABASE_JWT_SECRET", "my-secret")
        monkeypatch.setenv("OPEN_FOOD_FACTS_TIMEOUT", "2.5")

        settings = Settings(_env_file=None)

        assert settings.environment == "staging"
        assert settings.supabase_url == "https://test.supabase.co"
        assert settings.supabase_jwt_secret == "my-secret"
        assert settings.open_food_facts_timeout == 2.5
