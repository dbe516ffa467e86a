"""
Typed error taxonomy.

Callers should key on ``exc.code`` (stable machine string) and, for
validation failures, ``exc.field`` / ``exc.constraint``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "validation_error"
    MALFORMED_CREDENTIAL = "malformed_credential"
    ENCODING_ERROR = "encoding_error"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    UNKNOWN_PROFILE = "unknown_profile"


class CredHashError(Exception):
    """Base class for every error raised by this library."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(CredHashError, ValueError):
    """Bad caller input. Always recoverable by fixing the input."""

    code = ErrorCode.VALIDATION_ERROR
    default_field: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        constraint: Optional[str] = None,
    ):
        super().__init__(message, field=field or self.default_field)
        self.constraint = constraint


class PasswordValidationError(ValidationError):
    default_field = "password"


class SaltValidationError(ValidationError):
    default_field = "salt"


class DigestValidationError(ValidationError):
    default_field = "digest"


class IterationsValidationError(ValidationError):
    default_field = "iterations"


class KeyLengthValidationError(ValidationError):
    default_field = "key_length"


class UnsupportedAlgorithmError(ValidationError):
    code = ErrorCode.UNSUPPORTED_ALGORITHM
    default_field = "algorithm"


class UnknownProfileError(ValidationError):
    code = ErrorCode.UNKNOWN_PROFILE
    default_field = "profile"


class MalformedCredentialError(CredHashError, ValueError):
    """Stored credential text that cannot be split into salt and digest."""

    code = ErrorCode.MALFORMED_CREDENTIAL


class EncodingError(CredHashError, UnicodeError):
    """Text that has no UTF-8 encoding (e.g. a lone surrogate)."""

    code = ErrorCode.ENCODING_ERROR
