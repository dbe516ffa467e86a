"""
Library settings loaded from environment variables.

Every bound used by the validators, the credential codec and the rehash
policy is read from here.  Override with ``CREDHASH_*`` env vars or a
``.env`` file, or pass an explicit ``Settings`` instance to a service.
"""

from __future__ import annotations

import logging
import sys

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Hashing defaults ────────────────────────────────────────────────
    default_salt_length: int = 32
    default_iterations: int = 1           # simple path
    hardened_iterations: int = 100000     # hardened path / rehash target
    default_key_length: int = 64           # recorded only

    # ── Input bounds ─────────────────────────────────────────────────────
    min_salt_length: int = 8
    max_salt_length: int = 128
    max_password_length: int = 1024
    min_iterations: int = 1
    max_iterations: int = 10_000_000
    min_key_length: int = 8
    max_key_length: int = 512

    # ── Policy ───────────────────────────────────────────────────────────
    max_credential_age_days: int = 365
    min_verification_ms: int = 0           # 0 disables verification padding
    timing_attack_protection: bool = True
    profiles_file: str = ""                # empty means the packaged security_profiles.yaml

    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_prefix": "CREDHASH_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def max_credential_age_ms(self) -> int:
        return self.max_credential_age_days * 24 * 60 * 60 * 1000


config = Settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the library's default log format to the root logger."""
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
