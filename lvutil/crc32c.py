"""CRC-32C (Castagnoli) checksums and the masking used for stored checksums."""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF
_POLY = 0x82F63B78  # reflected Castagnoli polynomial
_XOR = 0xFFFFFFFF
MASK_DELTA = 0xA282EAD8


def _build_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ _POLY if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_TABLE = _build_table()


def extend(crc: int, data) -> int:
    """Return the crc32c of A + ``data``, where ``crc`` is the crc32c of A."""
    if not 0 <= crc <= _MASK32:
        raise ValueError(f"crc out of 32-bit range: {crc}")
    table = _TABLE
    state = crc ^ _XOR
    for byte in memoryview(data).cast("B"):
        state = table[(state ^ byte) & 0xFF] ^ (state >> 8)
    return state ^ _XOR


def value(data) -> int:
    """Return the crc32c of ``data``."""
    return extend(0, data)


def mask(crc: int) -> int:
    """Return a masked form of ``crc``, safe to store alongside checksummed data."""
    crc &= _MASK32
    rotated = ((crc >> 15) | (crc << 17)) & _MASK32
    return (rotated + MASK_DELTA) & _MASK32


def unmask(masked_crc: int) -> int:
    """Return the crc whose masked form is ``masked_crc``."""
    rot = (masked_crc - MASK_DELTA) & _MASK32
    return ((rot >> 17) | (rot << 15)) & _MASK32