"""
Digest algorithm dispatch.

The set of routines is closed: a credential naming anything outside
``DigestAlgorithm`` fails with ``UnsupportedAlgorithmError`` rather than
silently falling back to a default.
"""

from __future__ import annotations

from typing import Any, Callable, Dict

from core.digest import Message, sha256_hex
from utils.errors import UnsupportedAlgorithmError
from utils.schemas import DigestAlgorithm

DigestRoutine = Callable[[Message], str]

_ROUTINES: Dict[DigestAlgorithm, DigestRoutine] = {
    DigestAlgorithm.SHA256: sha256_hex,
}


def resolve_algorithm(value: Any) -> DigestAlgorithm:
    if isinstance(value, DigestAlgorithm):
        return value
    try:
        return DigestAlgorithm(value)
    except ValueError:
        raise UnsupportedAlgorithmError(
            f"Unsupported digest algorithm: {value!r}", constraint="unknown"
        ) from None


def get_digest_routine(algorithm: Any) -> DigestRoutine:
    return _ROUTINES[resolve_algorithm(algorithm)]


def iterated_digest(
    text: Message,
    iterations: int,
    algorithm: Any = DigestAlgorithm.SHA256,
) -> str:
    """
    Digest ``text`` once, then re-digest the hex output ``iterations - 1``
    more times.

    This is plain iterated hashing, not a key-derivation function: it has no
    memory cost and is only kept for compatibility with stored credentials.
    """
    routine = get_digest_routine(algorithm)
    value = routine(text)
    for _ in range(1, iterations):
        value = routine(value)
    return value
