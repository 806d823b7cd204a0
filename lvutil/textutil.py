"""Human-readable rendering and parsing of numbers and byte strings."""

from __future__ import annotations

_U64_MAX = 0xFFFFFFFFFFFFFFFF


def number_to_string(num: int) -> str:
    """Render an unsigned 64-bit number in decimal."""
    if not 0 <= num <= _U64_MAX:
        raise ValueError(f"not an unsigned 64-bit number: {num}")
    return str(num)


def escape_string(value) -> str:
    """Render bytes with non-printable characters as ``\\xNN`` escapes."""
    if isinstance(value, str):
        value = value.encode("utf-8")
    return "".join(
        chr(byte) if 0x20 <= byte <= 0x7E else f"\\x{byte:02x}" for byte in value
    )


def consume_decimal_number(data) -> tuple[int, bytes]:
    """Parse a leading unsigned 64-bit decimal number.

    Returns the number and the input that follows it. Raises ValueError if
    the input starts with no digit or the number does not fit in 64 bits.
    """
    value = 0
    digits = 0
    for byte in data:
        if not 0x30 <= byte <= 0x39:
            break
        value = value * 10 + (byte - 0x30)
        if value > _U64_MAX:
            raise ValueError("decimal number overflows 64 bits")
        digits += 1
    if digits == 0:
        raise ValueError("no decimal digits at start of input")
    return value, bytes(data[digits:])