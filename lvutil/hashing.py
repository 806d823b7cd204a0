"""A fast, murmur-like 32-bit hash over byte strings."""

from __future__ import annotations

_MASK = 0xFFFFFFFF
_M = 0xC6A4A793
_R = 24


def hash_bytes(data, seed: int) -> int:
    """Return the 32-bit hash of ``data`` with the given ``seed``."""
    data = bytes(data)
    n = len(data)
    h = (seed ^ (n * _M)) & _MASK

    whole = n - n % 4
    for pos in range(0, whole, 4):
        w = int.from_bytes(data[pos:pos + 4], "little")
        h = ((h + w) * _M) & _MASK
        h ^= h >> 16

    tail = data[whole:]
    if tail:
        if len(tail) == 3:
            h = (h + (tail[2] << 16)) & _MASK
        if len(tail) >= 2:
            h = (h + (tail[1] << 8)) & _MASK
        h = ((h + tail[0]) * _M) & _MASK
        h ^= h >> _R
    return h