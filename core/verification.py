"""
Verification service.

``verify`` and ``verify_detailed`` never raise: every failure, including a
malformed stored credential, maps to ``False`` / ``is_valid=False``, so an
authentication boundary cannot leak distinguishable error types.

The recomputation uses the *stored* iteration count and algorithm.  No pepper
is re-applied; a caller using a pepper passes ``password + pepper``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Tuple

from config.settings import Settings, config
from core.algorithms import iterated_digest
from core.codec import decode
from core.digest import sha256_hex
from utils.errors import CredHashError
from utils.schemas import (
    CredentialMetadata,
    CredentialRecord,
    DigestAlgorithm,
    VerificationResult,
)
from utils.timing import pad_to_minimum, time_safe_compare
from utils.validators import DELIMITER, validate_password

logger = logging.getLogger(__name__)


class VerificationService:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or config

    def _check(self, password: str, stored: str) -> Tuple[bool, CredentialRecord]:
        validate_password(password, self.settings)
        record = decode(stored, self.settings)
        meta = record.effective_metadata
        computed = iterated_digest(password + record.salt, meta.iterations, meta.algorithm)
        return time_safe_compare(computed, record.digest.lower()), record

    def verify(self, password: str, stored: str) -> bool:
        try:
            is_valid, record = self._check(password, stored)
        except CredHashError as exc:
            logger.debug("Verification rejected input (%s)", exc.code.value)
            return False
        except Exception:
            logger.exception("Unexpected error during verification")
            return False

        logger.debug(
            "Verification %s (iterations=%d, legacy=%s)",
            "succeeded" if is_valid else "failed",
            record.effective_metadata.iterations,
            record.is_legacy,
        )
        return is_valid

    async def verify_detailed(
        self,
        password: str,
        stored: str,
        *,
        min_duration_ms: float | None = None,
    ) -> VerificationResult:
        """
        Verify and report algorithm, elapsed wall-clock time and metadata.

        Optionally pads the call to ``min_duration_ms`` (defaults to
        ``settings.min_verification_ms``; 0 disables).
        """
        started = time.perf_counter()
        algorithm = DigestAlgorithm.SHA256
        details: Dict[str, Any]
        try:
            is_valid, record = self._check(password, stored)
            meta: CredentialMetadata = record.effective_metadata
            algorithm = meta.algorithm
            details = {
                "iterations": meta.iterations,
                "key_length": meta.key_length,
                "created_at": meta.created_at,
                "legacy_format": record.is_legacy,
                "secure_comparison": True,
            }
        except CredHashError as exc:
            is_valid = False
            details = {"error": exc.message, "error_code": exc.code.value}
            if getattr(exc, "field", None):
                details["field"] = exc.field
        except Exception as exc:
            logger.exception("Unexpected error during verification")
            is_valid = False
            details = {"error": str(exc) or type(exc).__name__, "error_code": "internal_error"}

        if min_duration_ms is None:
            min_duration_ms = self.settings.min_verification_ms
        if min_duration_ms:
            await pad_to_minimum(started, min_duration_ms)

        return VerificationResult(
            is_valid=is_valid,
            algorithm=algorithm,
            elapsed_ms=(time.perf_counter() - started) * 1000.0,
            metadata=details,
        )

    def simple_verify(self, password: str, stored: str) -> bool:
        """Accepts only the two-field ``salt:digest`` form."""
        if not isinstance(password, str) or not isinstance(stored, str):
            return False
        parts = stored.split(DELIMITER)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            return False
        salt, digest = parts
        try:
            computed = sha256_hex(password + salt)
        except CredHashError:
            return False
        return time_safe_compare(computed, digest.lower())


_default_service: VerificationService | None = None


def get_verification_service() -> VerificationService:
    global _default_service
    if _default_service is None:
        _default_service = VerificationService()
    return _default_service


def verify_password(password: str, stored: str) -> bool:
    return get_verification_service().verify(password, stored)


async def verify_password_detailed(password: str, stored: str) -> VerificationResult:
    return await get_verification_service().verify_detailed(password, stored)


def verify_password_simple(password: str, stored: str) -> bool:
    return get_verification_service().simple_verify(password, stored)
