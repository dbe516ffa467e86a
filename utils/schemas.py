"""
Pydantic schemas for options, credential records and results.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DigestAlgorithm(str, Enum):
    """Closed set of digest routines a credential may name."""

    SHA256 = "sha256"


# ═══════════════════════════════════════════════════════════════════════════════
# Hashing options / policy profiles
# ═══════════════════════════════════════════════════════════════════════════════


class HashOptions(BaseModel):
    """
    Caller-facing hashing options.

    ``None`` means "use the service default" (see ``config.settings``).
    Accepts both snake_case and camelCase keys (``saltLength`` …).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    algorithm: DigestAlgorithm = DigestAlgorithm.SHA256
    salt_length: Optional[int] = None
    iterations: Optional[int] = None
    key_length: Optional[int] = None
    pepper: Optional[str] = None


class SecurityProfile(BaseModel):
    """Named ``{iterations, salt_length, key_length, algorithm}`` tuple."""

    name: str
    iterations: int
    salt_length: int
    key_length: int
    algorithm: DigestAlgorithm = DigestAlgorithm.SHA256

    def to_options(self) -> HashOptions:
        return HashOptions(
            algorithm=self.algorithm,
            salt_length=self.salt_length,
            iterations=self.iterations,
            key_length=self.key_length,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Credential record
# ═══════════════════════════════════════════════════════════════════════════════


class CredentialMetadata(BaseModel):
    """
    Third field of the stored credential, serialised as compact JSON.

    ``createdAt`` is epoch milliseconds; the older ``timestamp`` key is
    accepted on read.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    algorithm: DigestAlgorithm = DigestAlgorithm.SHA256
    iterations: int = 1
    key_length: Optional[int] = None
    created_at: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("createdAt", "created_at", "timestamp"),
        serialization_alias="createdAt",
    )


LEGACY_METADATA = CredentialMetadata(algorithm=DigestAlgorithm.SHA256, iterations=1)


class CredentialRecord(BaseModel):
    """
    One hashed password: salt + hex digest + optional metadata.

    ``metadata is None`` is the legacy two-field form (``salt:digest``).
    """

    model_config = ConfigDict(frozen=True)

    salt: str
    digest: str
    metadata: Optional[CredentialMetadata] = None

    @property
    def effective_metadata(self) -> CredentialMetadata:
        return self.metadata if self.metadata is not None else LEGACY_METADATA

    @property
    def is_legacy(self) -> bool:
        return self.metadata is None


# ═══════════════════════════════════════════════════════════════════════════════
# Results
# ═══════════════════════════════════════════════════════════════════════════════


class VerificationResult(BaseModel):
    is_valid: bool
    algorithm: DigestAlgorithm = DigestAlgorithm.SHA256
    elapsed_ms: float = 0.0
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PolicyAudit(BaseModel):
    is_secure: bool
    warnings: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
