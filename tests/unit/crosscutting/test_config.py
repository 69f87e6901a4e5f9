"""
Unit tests for crosscutting/config.py (Settings validation).

Tests:
  - Defaults and store / mail selection helpers
  - TTL, algorithm, log level and pool bound validation
  - Production secret requirements
  - get_allowed_origins_list parsing
"""

import pytest
from pydantic import ValidationError

from authgate.crosscutting.config import Settings, get_settings

pytestmark = pytest.mark.unit


class TestSettings:
    """Test Settings class validation."""

    def test_test_environment_values(self):
        settings = get_settings()

        assert settings.app_env == "test"
        assert settings.jwt_access_ttl_minutes == 60
        assert settings.uses_database() is False
        assert settings.mail_enabled() is False

    def test_defaults(self, monkeypatch):
        for key in ("JWT_ACCESS_TTL_MINUTES", "PASSWORD_TIME_COST", "LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)

        settings = Settings()

        assert settings.jwt_access_ttl_minutes == 24 * 60
        assert settings.jwt_algorithm == "HS256"
        assert settings.password_time_cost == 3
        assert settings.log_level == "INFO"
        assert settings.signup_auto_activate is True

    def test_store_and_mail_selection(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost/db")
        monkeypatch.setenv("SMTP_HOST", "smtp.local")

        settings = Settings()

        assert settings.uses_database() is True
        assert settings.mail_enabled() is True

    @pytest.mark.parametrize("ttl", ["0", "-5"])
    def test_ttl_must_be_positive(self, monkeypatch, ttl):
        monkeypatch.setenv("JWT_ACCESS_TTL_MINUTES", ttl)

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "jwt_access_ttl_minutes must be greater than 0" in str(exc_info.value)

    def test_algorithm_is_normalized_and_restricted(self, monkeypatch):
        monkeypatch.setenv("JWT_ALGORITHM", "hs512")
        assert Settings().jwt_algorithm == "HS512"

        monkeypatch.setenv("JWT_ALGORITHM", "none")
        with pytest.raises(ValidationError):
            Settings()

    def test_log_level_validation(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings().log_level == "DEBUG"

        monkeypatch.setenv("LOG_LEVEL", "loud")
        with pytest.raises(ValidationError):
            Settings()

    def test_pool_bounds(self, monkeypatch):
        monkeypatch.setenv("DB_POOL_MIN_SIZE", "5")
        monkeypatch.setenv("DB_POOL_MAX_SIZE", "2")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "db_pool_min_size (5) must be <= db_pool_max_size (2)" in str(
            exc_info.value
        )

    def test_production_rejects_default_secret(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("JWT_SECRET", "dev-secret")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "JWT_SECRET" in str(exc_info.value)

    def test_production_rejects_short_secret(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("JWT_SECRET", "short-but-not-default")

        with pytest.raises(ValidationError):
            Settings()

    def test_production_accepts_strong_secret(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("JWT_SECRET", "x" * 48)

        assert Settings().is_production() is True


class TestAllowedOrigins:
    def test_parsing(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", " http://a.com , ,http://b.com")

        assert Settings().get_allowed_origins_list() == ["http://a.com", "http://b.com"]
