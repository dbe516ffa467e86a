"""
Hashing service: password, salt and optional pepper into stored credential text.

NOTE: the digest is re-applied to its own hex output ``iterations - 1``
times.  That is iterated hashing, not a memory-hard KDF.  A real KDF can be
swapped in behind ``core.algorithms`` without changing the stored format.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError as SchemaError

from config.settings import Settings, config
from core.algorithms import iterated_digest, resolve_algorithm
from core.codec import encode
from core.digest import sha256_hex
from utils.errors import ValidationError
from utils.salt import CryptoSaltProvider, SaltProvider
from utils.schemas import CredentialMetadata, CredentialRecord, HashOptions
from utils.validators import validate_options, validate_password, validate_salt

logger = logging.getLogger(__name__)

OptionsLike = Union[HashOptions, Dict[str, Any], None]

SIMPLE_SALT_LENGTH = 16


def epoch_millis() -> int:
    return int(time.time() * 1000)


def coerce_options(options: OptionsLike) -> HashOptions:
    """Accept a ``HashOptions``, a plain dict (snake or camel case) or None."""
    if options is None:
        return HashOptions()
    if isinstance(options, HashOptions):
        return options

    data = dict(options)
    if "algorithm" in data:
        data["algorithm"] = resolve_algorithm(data["algorithm"])
    try:
        return HashOptions.model_validate(data)
    except SchemaError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ValidationError(
            f"Invalid hashing option {field}: {first['msg']}",
            field=field,
            constraint="type",
        ) from exc


class HashingService:
    """
    Stateless apart from its injected collaborators: a salt provider and a
    clock returning epoch milliseconds.
    """

    def __init__(
        self,
        salt_provider: SaltProvider | None = None,
        clock: Callable[[], int] | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or config
        self.salt_provider = salt_provider or CryptoSaltProvider(self.settings)
        self.clock = clock or epoch_millis

    def resolve_options(
        self,
        options: OptionsLike = None,
        *,
        default_iterations: int | None = None,
    ) -> HashOptions:
        """Fill unset fields from settings and validate the result."""
        opts = coerce_options(options)
        if default_iterations is None:
            default_iterations = self.settings.default_iterations

        resolved = HashOptions(
            algorithm=opts.algorithm,
            salt_length=_first_set(opts.salt_length, self.settings.default_salt_length),
            iterations=_first_set(opts.iterations, default_iterations),
            key_length=_first_set(opts.key_length, self.settings.default_key_length),
            pepper=opts.pepper,
        )
        validate_options(resolved, self.settings)
        return resolved

    def hash_record(
        self,
        password: str,
        options: OptionsLike = None,
        *,
        default_iterations: int | None = None,
    ) -> CredentialRecord:
        """Hash ``password`` and return the structured record."""
        validate_password(password, self.settings)
        opts = self.resolve_options(options, default_iterations=default_iterations)
        # verify receives password + pepper, so the combined text must pass too
        if opts.pepper:
            validate_password(password + opts.pepper, self.settings)

        salt = self.salt_provider.generate(opts.salt_length)
        validate_salt(salt, self.settings)

        material = password + salt
        if opts.pepper:
            material += opts.pepper

        digest = iterated_digest(material, opts.iterations, opts.algorithm)
        metadata = CredentialMetadata(
            algorithm=opts.algorithm,
            iterations=opts.iterations,
            key_length=opts.key_length,
            created_at=self.clock(),
        )
        logger.debug(
            "Hashed credential (algorithm=%s, iterations=%d, salt_length=%d, pepper=%s)",
            opts.algorithm.value,
            opts.iterations,
            len(salt),
            bool(opts.pepper),
        )
        return CredentialRecord(salt=salt, digest=digest, metadata=metadata)

    def hash(self, password: str, options: OptionsLike = None) -> str:
        """Simple path: unset ``iterations`` means ``settings.default_iterations``."""
        return encode(self.hash_record(password, options), self.settings)

    def hash_hardened(self, password: str, options: OptionsLike = None) -> str:
        """Hardened path: unset ``iterations`` means ``settings.hardened_iterations``."""
        record = self.hash_record(
            password, options, default_iterations=self.settings.hardened_iterations
        )
        return encode(record, self.settings)

    def simple_hash(self, password: str) -> str:
        """Legacy two-field ``salt:digest`` with a single digest pass."""
        validate_password(password, self.settings)
        salt = self.salt_provider.generate(SIMPLE_SALT_LENGTH)
        record = CredentialRecord(salt=salt, digest=sha256_hex(password + salt))
        return encode(record, self.settings)


def _first_set(value: Optional[int], default: int) -> int:
    return default if value is None else value


_default_service: HashingService | None = None


def get_hashing_service() -> HashingService:
    """Lazily build the module-wide service on first use."""
    global _default_service
    if _default_service is None:
        _default_service = HashingService()
    return _default_service


def hash_password(password: str, options: OptionsLike = None) -> str:
    return get_hashing_service().hash(password, options)


def hash_password_hardened(password: str, options: OptionsLike = None) -> str:
    return get_hashing_service().hash_hardened(password, options)


def hash_password_detailed(password: str, options: OptionsLike = None) -> CredentialRecord:
    service = get_hashing_service()
    return service.hash_record(
        password, options, default_iterations=service.settings.hardened_iterations
    )


def hash_password_simple(password: str) -> str:
    return get_hashing_service().simple_hash(password)
