"""
Tests for application settings.
"""

import logging

from fintrack.config import Settings, configure_logging, get_env_file, get_settings


class TestSettings:
    """Test settings defaults and overrides."""

    def test_solver_defaults(self):
        """Defaults reproduce the historical solver parameters."""
        settings = Settings()
        assert settings.xirr_max_iterations == 100
        assert settings.xirr_tolerance == 1e-4
        assert settings.xirr_default_guess == 0.1
        assert settings.xirr_strict is False

    def test_env_override(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("XIRR_STRICT", "1")
        settings = Settings()
        assert settings.log_level == "DEBUG"
        assert settings.xirr_strict is True

    def test_cached(self):
        """get_settings returns one shared instance."""
        assert get_settings() is get_settings()

    def test_env_file_selection(self, monkeypatch):
        """Production reads its own env file."""
        monkeypatch.setenv("APP_ENV", "production")
        assert get_env_file() == ".env.production"
        monkeypatch.setenv("APP_ENV", "staging")
        assert get_env_file() == ".env.development"


class TestLogging:
    """Test logging setup."""

    def test_configure_logging_explicit_level(self, monkeypatch):
        """An explicit level is applied to the root logger."""
        root = logging.getLogger()
        previous = root.level
        monkeypatch.setattr(root, "handlers", [])
        try:
            configure_logging("warning")
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)
