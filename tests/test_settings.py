"""
Tests for environment-driven settings.
"""

from unittest.mock import patch

import pytest

from config.settings import Settings, configure_logging
from core.codec import decode
from utils.errors import SaltValidationError


class TestSettings:
    def test_defaults(self):
        cfg = Settings()
        assert cfg.default_salt_length == 32
        assert cfg.default_iterations == 1
        assert cfg.hardened_iterations == 100000
        assert (cfg.min_salt_length, cfg.max_salt_length) == (8, 128)
        assert cfg.max_credential_age_ms == 365 * 24 * 60 * 60 * 1000

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CREDHASH_MAX_SALT_LENGTH", "64")
        monkeypatch.setenv("CREDHASH_HARDENED_ITERATIONS", "5000")
        cfg = Settings()
        assert cfg.max_salt_length == 64
        assert cfg.hardened_iterations == 5000

    def test_codec_bounds_follow_settings(self):
        text = f"{'s' * 12}:abcd"
        assert decode(text).salt == "s" * 12
        with pytest.raises(SaltValidationError):
            decode(text, Settings(min_salt_length=16))


class TestConfigureLogging:
    def test_uses_explicit_level(self):
        with patch("config.settings.logging.basicConfig") as basic:
            configure_logging("debug")
        assert basic.call_args.kwargs["level"] == "DEBUG"

    def test_defaults_to_settings_level(self):
        with patch("config.settings.logging.basicConfig") as basic:
            configure_logging()
        assert basic.call_args.kwargs["level"] == "INFO"
