"""
HMAC-SHA256 (RFC 2104) over the in-house digest engine.
"""

from __future__ import annotations

from core.digest import BLOCK_SIZE, Message, sha256_bytes, to_bytes

_IPAD = 0x36
_OPAD = 0x5C


def hmac_sha256(key: Message, message: Message) -> bytes:
    """Return the 32-byte HMAC of ``message`` under ``key``."""
    key_bytes = to_bytes(key)
    if len(key_bytes) > BLOCK_SIZE:
        key_bytes = sha256_bytes(key_bytes)
    key_bytes = key_bytes.ljust(BLOCK_SIZE, b"\x00")

    inner_key = bytes(k ^ _IPAD for k in key_bytes)
    outer_key = bytes(k ^ _OPAD for k in key_bytes)

    inner = sha256_bytes(inner_key + to_bytes(message))
    return sha256_bytes(outer_key + inner)


def hmac_sha256_hex(key: Message, message: Message) -> str:
    return hmac_sha256(key, message).hex()
