"""
Input validators used by the hashing, verification and codec paths.

Bounds come from ``config.settings``; every failure raises a typed
``ValidationError`` subclass naming the field and the violated constraint.
"""

from __future__ import annotations

import re
from typing import Any

from config.settings import Settings, config
from utils.errors import (
    DigestValidationError,
    IterationsValidationError,
    KeyLengthValidationError,
    PasswordValidationError,
    SaltValidationError,
)
from utils.schemas import HashOptions

_HEX_RE = re.compile(r"[0-9a-fA-F]+")

DELIMITER = ":"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_password(password: Any, settings: Settings | None = None) -> None:
    settings = settings or config
    if not isinstance(password, str):
        raise PasswordValidationError("Password must be a string", constraint="type")
    if not password:
        raise PasswordValidationError("Password cannot be empty", constraint="empty")
    if len(password) > settings.max_password_length:
        raise PasswordValidationError(
            f"Password is too long (max {settings.max_password_length} characters)",
            constraint="too_long",
        )
    if "\0" in password:
        raise PasswordValidationError(
            "Password cannot contain null bytes", constraint="nul_byte"
        )


def validate_salt(salt: Any, settings: Settings | None = None) -> None:
    settings = settings or config
    if not isinstance(salt, str):
        raise SaltValidationError("Salt must be a string", constraint="type")
    if len(salt) < settings.min_salt_length:
        raise SaltValidationError(
            f"Salt must be at least {settings.min_salt_length} characters long",
            constraint="too_short",
        )
    if len(salt) > settings.max_salt_length:
        raise SaltValidationError(
            f"Salt must be at most {settings.max_salt_length} characters long",
            constraint="too_long",
        )
    if DELIMITER in salt:
        raise SaltValidationError(
            f"Salt cannot contain the '{DELIMITER}' delimiter", constraint="delimiter"
        )
    if not salt.isprintable():
        raise SaltValidationError(
            "Salt must contain only printable characters", constraint="not_printable"
        )


def validate_digest_hex(digest: Any) -> None:
    if not isinstance(digest, str):
        raise DigestValidationError("Digest must be a string", constraint="type")
    if not digest:
        raise DigestValidationError("Digest cannot be empty", constraint="empty")
    if not _HEX_RE.fullmatch(digest):
        raise DigestValidationError(
            "Digest must contain only hexadecimal characters", constraint="not_hex"
        )


def validate_iterations(iterations: Any, settings: Settings | None = None) -> None:
    settings = settings or config
    if not _is_int(iterations):
        raise IterationsValidationError("Iterations must be an integer", constraint="type")
    if not settings.min_iterations <= iterations <= settings.max_iterations:
        raise IterationsValidationError(
            f"Iterations must be between {settings.min_iterations} "
            f"and {settings.max_iterations:,}",
            constraint="out_of_range",
        )


def validate_key_length(key_length: Any, settings: Settings | None = None) -> None:
    settings = settings or config
    if not _is_int(key_length):
        raise KeyLengthValidationError("Key length must be an integer", constraint="type")
    if not settings.min_key_length <= key_length <= settings.max_key_length:
        raise KeyLengthValidationError(
            f"Key length must be between {settings.min_key_length} "
            f"and {settings.max_key_length} bytes",
            constraint="out_of_range",
        )


def validate_salt_length(length: Any, settings: Settings | None = None) -> None:
    """A requested salt length must produce a salt the codec will accept."""
    settings = settings or config
    if not _is_int(length):
        raise SaltValidationError(
            "Salt length must be an integer", field="salt_length", constraint="type"
        )
    if not settings.min_salt_length <= length <= settings.max_salt_length:
        raise SaltValidationError(
            f"Salt length must be between {settings.min_salt_length} "
            f"and {settings.max_salt_length}",
            field="salt_length",
            constraint="out_of_range",
        )


def validate_options(options: HashOptions, settings: Settings | None = None) -> None:
    """Check a fully-resolved ``HashOptions`` (no ``None`` numeric fields)."""
    validate_salt_length(options.salt_length, settings)
    validate_iterations(options.iterations, settings)
    validate_key_length(options.key_length, settings)
