"""Endian-neutral encoding of fixed-width integers, varints and byte strings.

Fixed-width numbers are little-endian; varints use seven bits per byte
with the high bit marking continuation; strings are prefixed by their
length as a varint32.
"""

from __future__ import annotations

import struct

_U32_MAX = 0xFFFFFFFF
_U64_MAX = 0xFFFFFFFFFFFFFFFF
_FIXED32 = struct.Struct("<I")
_FIXED64 = struct.Struct("<Q")


def _check_range(value: int, limit: int, what: str) -> None:
    if not 0 <= value <= limit:
        raise ValueError(f"{what} out of range: {value}")


def _check_offset(offset: int) -> None:
    if offset < 0:
        raise ValueError(f"negative offset: {offset}")


def encode_fixed32(value: int) -> bytes:
    _check_range(value, _U32_MAX, "fixed32 value")
    return _FIXED32.pack(value)


def encode_fixed64(value: int) -> bytes:
    _check_range(value, _U64_MAX, "fixed64 value")
    return _FIXED64.pack(value)


def decode_fixed32(data, offset: int = 0) -> int:
    _check_offset(offset)
    try:
        return _FIXED32.unpack_from(data, offset)[0]
    except struct.error as exc:
        raise ValueError("not enough bytes for fixed32") from exc


def decode_fixed64(data, offset: int = 0) -> int:
    _check_offset(offset)
    try:
        return _FIXED64.unpack_from(data, offset)[0]
    except struct.error as exc:
        raise ValueError("not enough bytes for fixed64") from exc


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_varint32(value: int) -> bytes:
    _check_range(value, _U32_MAX, "varint32 value")
    return _encode_varint(value)


def encode_varint64(value: int) -> bytes:
    _check_range(value, _U64_MAX, "varint64 value")
    return _encode_varint(value)


def _decode_varint(data, offset: int, max_shift: int, mask: int) -> tuple[int, int]:
    _check_offset(offset)
    result = 0
    for shift, pos in zip(range(0, max_shift + 1, 7), range(offset, len(data))):
        byte = data[pos]
        if byte & 0x80:
            result |= (byte & 0x7F) << shift
        else:
            return (result | (byte << shift)) & mask, pos + 1
    raise ValueError("truncated or overlong varint")


def decode_varint32(data, offset: int = 0) -> tuple[int, int]:
    """Return the varint32 at ``offset`` and the offset just past it."""
    return _decode_varint(data, offset, 28, _U32_MAX)


def decode_varint64(data, offset: int = 0) -> tuple[int, int]:
    """Return the varint64 at ``offset`` and the offset just past it."""
    return _decode_varint(data, offset, 63, _U64_MAX)


def varint_length(value: int) -> int:
    """Number of bytes the varint encoding of ``value`` takes."""
    length = 1
    while value >= 0x80:
        value >>= 7
        length += 1
    return length


def encode_length_prefixed(value: bytes) -> bytes:
    return encode_varint32(len(value)) + bytes(value)


def decode_length_prefixed(data, offset: int = 0) -> tuple[bytes, int]:
    """Return the length-prefixed string at ``offset`` and the offset past it."""
    length, pos = decode_varint32(data, offset)
    end = pos + length
    if end > len(data):
        raise ValueError("length-prefixed value runs past the end of input")
    return bytes(data[pos:end]), end