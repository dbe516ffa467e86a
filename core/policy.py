"""
Rehash / upgrade policy and option auditing.
"""

from __future__ import annotations

import logging
from typing import Optional

from config.settings import Settings, config
from core.codec import decode
from core.hashing import HashingService, OptionsLike, coerce_options, epoch_millis
from core.verification import VerificationService
from utils.errors import CredHashError
from utils.schemas import PolicyAudit

logger = logging.getLogger(__name__)

RECOMMENDED_MIN_SALT = 16
RECOMMENDED_MIN_ITERATIONS = 10_000
RECOMMENDED_MIN_KEY_LENGTH = 32
SUGGESTED_ITERATIONS = 100_000
SUGGESTED_SALT = 32


class RehashPolicy:
    """
    Decides whether a stored credential should be replaced, and replaces it
    once the caller has proven knowledge of the password.
    """

    def __init__(
        self,
        hashing_service: HashingService | None = None,
        verification_service: VerificationService | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or config
        self.hasher = hashing_service or HashingService(settings=self.settings)
        self.verifier = verification_service or VerificationService(self.settings)

    def needs_rehash(
        self,
        stored: str,
        current_options: OptionsLike = None,
        *,
        now_ms: int | None = None,
    ) -> bool:
        """
        True when stored iterations are below the current policy, the
        algorithm differs, metadata or its timestamp is missing, the
        credential is older than ``max_credential_age_days``, or it cannot
        be decoded at all.
        """
        opts = coerce_options(current_options)
        current_iterations = (
            opts.iterations if opts.iterations is not None
            else self.settings.hardened_iterations
        )
        current_algorithm = opts.algorithm

        try:
            record = decode(stored, self.settings)
        except CredHashError as exc:
            logger.debug("Undecodable credential flagged for rehash (%s)", exc.code.value)
            return True

        meta = record.metadata
        if meta is None or meta.created_at is None:
            return True

        now = epoch_millis() if now_ms is None else now_ms
        return (
            meta.iterations < current_iterations
            or meta.algorithm != current_algorithm
            or now - meta.created_at > self.settings.max_credential_age_ms
        )

    def upgrade(
        self, password: str, old_stored: str, new_options: OptionsLike = None
    ) -> Optional[str]:
        """
        Re-hash ``password`` under ``new_options`` if it verifies against
        ``old_stored``; otherwise return None.  Unset iterations default to
        the hardened count.  The caller persists the replacement.
        """
        if not self.verifier.verify(password, old_stored):
            return None
        return self.hasher.hash_hardened(password, new_options)

    async def upgrade_async(
        self, password: str, old_stored: str, new_options: OptionsLike = None
    ) -> Optional[str]:
        result = await self.verifier.verify_detailed(password, old_stored)
        if not result.is_valid:
            return None
        return self.hasher.hash_hardened(password, new_options)

    def audit(self, options: OptionsLike = None) -> PolicyAudit:
        """Flag weak hashing options; unset fields use the library defaults."""
        opts = coerce_options(options)
        salt_length = opts.salt_length or self.settings.default_salt_length
        iterations = opts.iterations or self.settings.hardened_iterations
        key_length = opts.key_length or self.settings.default_key_length

        warnings = []
        recommendations = []
        if salt_length < RECOMMENDED_MIN_SALT:
            warnings.append(
                f"Salt length is too short (minimum recommended: {RECOMMENDED_MIN_SALT})"
            )
        if iterations < RECOMMENDED_MIN_ITERATIONS:
            warnings.append(
                f"Iteration count is too low (minimum recommended: {RECOMMENDED_MIN_ITERATIONS:,})"
            )
        if key_length < RECOMMENDED_MIN_KEY_LENGTH:
            warnings.append(
                f"Key length is too short (minimum recommended: {RECOMMENDED_MIN_KEY_LENGTH})"
            )
        if not self.settings.timing_attack_protection:
            warnings.append("Timing attack protection is disabled")

        if iterations < SUGGESTED_ITERATIONS:
            recommendations.append(
                f"Consider increasing iterations to {SUGGESTED_ITERATIONS:,} or more"
            )
        if salt_length < SUGGESTED_SALT:
            recommendations.append(
                f"Consider increasing salt length to {SUGGESTED_SALT} or more"
            )

        if warnings:
            logger.warning("Hashing options audit found %d warning(s)", len(warnings))
        return PolicyAudit(
            is_secure=not warnings,
            warnings=warnings,
            recommendations=recommendations,
        )


_default_policy: RehashPolicy | None = None


def get_rehash_policy() -> RehashPolicy:
    global _default_policy
    if _default_policy is None:
        _default_policy = RehashPolicy()
    return _default_policy


def needs_rehash(stored: str, current_options: OptionsLike = None) -> bool:
    return get_rehash_policy().needs_rehash(stored, current_options)


def upgrade_password_hash(
    password: str, old_stored: str, new_options: OptionsLike = None
) -> Optional[str]:
    return get_rehash_policy().upgrade(password, old_stored, new_options)


async def upgrade_password_hash_async(
    password: str, old_stored: str, new_options: OptionsLike = None
) -> Optional[str]:
    return await get_rehash_policy().upgrade_async(password, old_stored, new_options)


def audit_options(options: OptionsLike = None) -> PolicyAudit:
    return get_rehash_policy().audit(options)
