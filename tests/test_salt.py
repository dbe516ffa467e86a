"""
Tests for the salt providers.
"""

import random

import pytest

from config.settings import Settings
from utils.errors import SaltValidationError
from utils.salt import (
    PASSWORD_SPECIALS,
    CryptoSaltProvider,
    PatternSaltProvider,
    RandomSaltProvider,
    TimeMixedSaltProvider,
    generate_secure_password,
)


class TestCryptoSaltProvider:
    @pytest.mark.parametrize("length", [8, 15, 16, 32, 128])
    def test_exact_length_hex(self, length):
        salt = CryptoSaltProvider().generate(length)
        assert len(salt) == length
        int(salt, 16)

    def test_not_reused(self):
        provider = CryptoSaltProvider()
        salts = {provider.generate(32) for _ in range(50)}
        assert len(salts) == 50

    @pytest.mark.parametrize("length", [0, 7, 129])
    def test_length_out_of_bounds(self, length):
        with pytest.raises(SaltValidationError) as exc_info:
            CryptoSaltProvider().generate(length)
        assert exc_info.value.field == "salt_length"

    def test_bounds_follow_settings(self):
        provider = CryptoSaltProvider(Settings(max_salt_length=16))
        with pytest.raises(SaltValidationError):
            provider.generate(17)

    def test_callable(self):
        assert len(CryptoSaltProvider()(12)) == 12


class TestCharsetProviders:
    def test_random_provider_is_seedable(self):
        a = RandomSaltProvider(rng=random.Random(7)).generate(24)
        b = RandomSaltProvider(rng=random.Random(7)).generate(24)
        assert a == b and len(a) == 24

    def test_charset_with_delimiter_rejected(self):
        with pytest.raises(SaltValidationError, match="delimiter"):
            RandomSaltProvider(charset="ab:c")

    def test_empty_charset_rejected(self):
        with pytest.raises(SaltValidationError):
            RandomSaltProvider(charset="")

    @pytest.mark.parametrize(
        "pattern, allowed",
        [("number", set("0123456789")), ("alpha", set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"))],
    )
    def test_pattern_provider(self, pattern, allowed):
        salt = PatternSaltProvider(pattern).generate(64)
        assert set(salt) <= allowed

    def test_time_mixed_provider_warns_and_respects_length(self, caplog):
        with caplog.at_level("WARNING"):
            provider = TimeMixedSaltProvider()
        assert "CSPRNG" in caplog.text
        salt = provider.generate(40)
        assert len(salt) == 40
        assert ":" not in salt


class TestGenerateSecurePassword:
    def test_contains_every_group(self):
        password = generate_secure_password(16)
        assert len(password) == 16
        assert any(c.islower() for c in password)
        assert any(c.isupper() for c in password)
        assert any(c.isdigit() for c in password)
        assert any(c in PASSWORD_SPECIALS for c in password)

    def test_without_specials(self):
        password = generate_secure_password(12, include_special=False)
        assert len(password) == 12
        assert password.isalnum()

    def test_too_short(self):
        with pytest.raises(ValueError):
            generate_secure_password(3)

    def test_not_reused(self):
        assert generate_secure_password() != generate_secure_password()
