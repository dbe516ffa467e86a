"""
SHA-256 digest engine (FIPS 180-4), implemented in pure Python.

Stateless and deterministic: the round constants and initial hash state are
module-level tuples and are never mutated.  All word arithmetic is masked to
32 bits explicitly since Python integers do not wrap.
"""

from __future__ import annotations

import struct
from typing import Tuple, Union

from utils.errors import EncodingError

Message = Union[str, bytes, bytearray, memoryview]

DIGEST_SIZE = 32
BLOCK_SIZE = 64

_MASK = 0xFFFFFFFF

# First 32 bits of the fractional parts of the cube roots of the first 64 primes.
_K: Tuple[int, ...] = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5, 0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3, 0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC, 0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7, 0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13, 0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3, 0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5, 0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208, 0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)

_H0: Tuple[int, ...] = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def to_bytes(message: Message) -> bytes:
    """UTF-8 encode ``str`` input; pass bytes-like input through unchanged."""
    if isinstance(message, str):
        try:
            return message.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise EncodingError(
                f"Input is not encodable as UTF-8 at position {exc.start}: {exc.reason}"
            ) from exc
    if isinstance(message, (bytes, bytearray, memoryview)):
        return bytes(message)
    raise TypeError(f"Cannot digest object of type {type(message).__name__}")


def _pad(data: bytes) -> bytes:
    """0x80, zeros up to 56 mod 64, then the 64-bit big-endian bit length."""
    bit_length = (len(data) * 8) & 0xFFFFFFFFFFFFFFFF
    zeros = (55 - len(data)) % BLOCK_SIZE
    return data + b"\x80" + b"\x00" * zeros + struct.pack(">Q", bit_length)


def _compress(state: Tuple[int, ...], block: bytes) -> Tuple[int, ...]:
    w = list(struct.unpack(">16L", block))
    for t in range(16, 64):
        s0 = _rotr(w[t - 15], 7) ^ _rotr(w[t - 15], 18) ^ (w[t - 15] >> 3)
        s1 = _rotr(w[t - 2], 17) ^ _rotr(w[t - 2], 19) ^ (w[t - 2] >> 10)
        w.append((w[t - 16] + s0 + w[t - 7] + s1) & _MASK)

    a, b, c, d, e, f, g, h = state
    for t in range(64):
        big_s1 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
        ch = (e & f) ^ (~e & _MASK & g)
        temp1 = (h + big_s1 + ch + _K[t] + w[t]) & _MASK
        big_s0 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
        maj = (a & b) ^ (a & c) ^ (b & c)
        temp2 = (big_s0 + maj) & _MASK

        h = g
        g = f
        f = e
        e = (d + temp1) & _MASK
        d = c
        c = b
        b = a
        a = (temp1 + temp2) & _MASK

    return tuple(
        (x + y) & _MASK for x, y in zip(state, (a, b, c, d, e, f, g, h))
    )


def sha256_bytes(message: Message) -> bytes:
    """Return the raw 32-byte digest of ``message``."""
    padded = _pad(to_bytes(message))
    state = _H0
    for offset in range(0, len(padded), BLOCK_SIZE):
        state = _compress(state, padded[offset:offset + BLOCK_SIZE])
    return struct.pack(">8L", *state)


def sha256_hex(message: Message) -> str:
    """Return the digest of ``message`` as 64 lowercase hex characters."""
    return sha256_bytes(message).hex()


sha256 = sha256_hex
