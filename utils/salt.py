"""
Salt providers.

The hashing service treats a provider as an opaque capability: ``generate``
returns exactly ``length`` symbols and never reuses a salt across calls.
No charset contains ``:``, so a salt can never break the credential format.

Only ``CryptoSaltProvider`` is backed by a CSPRNG.  The others reproduce
older strategies and are not suitable for real credentials.
"""

from __future__ import annotations

import logging
import random
import secrets
import string
import time
from abc import ABC, abstractmethod

from config.settings import Settings, config
from utils.errors import SaltValidationError
from utils.validators import DELIMITER, validate_salt_length

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = string.ascii_letters + string.digits + "+/"
SECURE_CHARSET = string.ascii_letters + string.digits + "!@#$%^&*()_+-=[]{}|;,.<>?"

PATTERN_CHARSETS = {
    "number": string.digits,
    "alpha": string.ascii_letters,
    "mixed": DEFAULT_CHARSET,
    "secure": SECURE_CHARSET,
}


class SaltProvider(ABC):
    """Abstract salt source injected into ``HashingService``."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or config

    @abstractmethod
    def _generate(self, length: int) -> str:
        ...

    def generate(self, length: int) -> str:
        validate_salt_length(length, self.settings)
        return self._generate(length)

    def __call__(self, length: int) -> str:
        return self.generate(length)


class CryptoSaltProvider(SaltProvider):
    """Hex symbols from ``secrets`` (OS CSPRNG). The default provider."""

    def _generate(self, length: int) -> str:
        return secrets.token_hex((length + 1) // 2)[:length]


class RandomSaltProvider(SaltProvider):
    """Charset symbols from a non-cryptographic ``random.Random``."""

    def __init__(
        self,
        charset: str = DEFAULT_CHARSET,
        rng: random.Random | None = None,
        settings: Settings | None = None,
    ):
        super().__init__(settings)
        if not charset:
            raise SaltValidationError("Charset cannot be empty", field="charset", constraint="empty")
        if DELIMITER in charset:
            raise SaltValidationError(
                f"Charset cannot contain the '{DELIMITER}' delimiter",
                field="charset",
                constraint="delimiter",
            )
        self.charset = charset
        self.rng = rng or random.Random()

    def _generate(self, length: int) -> str:
        return "".join(self.rng.choice(self.charset) for _ in range(length))


class PatternSaltProvider(RandomSaltProvider):
    """Fixed-charset salts for tests: number / alpha / mixed / secure."""

    def __init__(
        self,
        pattern: str = "mixed",
        rng: random.Random | None = None,
        settings: Settings | None = None,
    ):
        super().__init__(
            PATTERN_CHARSETS.get(pattern, DEFAULT_CHARSET), rng=rng, settings=settings
        )
        self.pattern = pattern


class TimeMixedSaltProvider(RandomSaltProvider):
    """
    XOR of wall-clock time, ``random`` and a high-resolution counter.

    Weak: neither input is a cryptographic entropy source.
    """

    def __init__(self, charset: str = SECURE_CHARSET, settings: Settings | None = None):
        super().__init__(charset, settings=settings)
        logger.warning(
            "TimeMixedSaltProvider is not backed by a CSPRNG; use CryptoSaltProvider "
            "for stored credentials"
        )

    def _generate(self, length: int) -> str:
        size = len(self.charset)
        symbols = []
        for _ in range(length):
            time_entropy = (time.time_ns() // 1_000_000) % size
            random_entropy = self.rng.randrange(size)
            counter_entropy = time.perf_counter_ns() % size
            symbols.append(self.charset[(time_entropy ^ random_entropy ^ counter_entropy) % size])
        return "".join(symbols)


PASSWORD_SPECIALS = "!@#$%^&*()_+-=[]{}|;:,.<>?"


def generate_secure_password(length: int = 16, include_special: bool = True) -> str:
    """
    Random password with at least one lowercase letter, uppercase letter and
    digit (and special symbol when ``include_special``), drawn from ``secrets``.
    """
    groups = [string.ascii_lowercase, string.ascii_uppercase, string.digits]
    if include_special:
        groups.append(PASSWORD_SPECIALS)
    if length < len(groups):
        raise ValueError(f"Password length must be at least {len(groups)}")

    charset = "".join(groups)
    chars = [secrets.choice(group) for group in groups]
    chars.extend(secrets.choice(charset) for _ in range(length - len(groups)))
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
