"""Key orderings used to sort and shorten keys."""

from __future__ import annotations

import abc


class Comparator(abc.ABC):
    """A total order over byte-string keys."""

    @abc.abstractmethod
    def name(self) -> str:
        """Name identifying this ordering; changes if the order changes."""

    @abc.abstractmethod
    def compare(self, a: bytes, b: bytes) -> int:
        """Return negative, zero or positive as ``a`` is less, equal or greater."""

    @abc.abstractmethod
    def find_shortest_separator(self, start: bytes, limit: bytes) -> bytes:
        """Return a short key in [start, limit) when start < limit."""

    @abc.abstractmethod
    def find_short_successor(self, key: bytes) -> bytes:
        """Return a short key that is >= ``key``."""


class BytewiseComparator(Comparator):
    """Lexicographic order over unsigned bytes."""

    def name(self) -> str:
        return "leveldb.BytewiseComparator"

    def compare(self, a: bytes, b: bytes) -> int:
        a, b = bytes(a), bytes(b)
        return (a > b) - (a < b)

    def find_shortest_separator(self, start: bytes, limit: bytes) -> bytes:
        start, limit = bytes(start), bytes(limit)
        min_length = min(len(start), len(limit))
        diff_index = next(
            (i for i in range(min_length) if start[i] != limit[i]), min_length
        )
        if diff_index >= min_length:
            # One is a prefix of the other: leave start alone.
            return start
        diff_byte = start[diff_index]
        if diff_byte < 0xFF and diff_byte + 1 < limit[diff_index]:
            return start[:diff_index] + bytes([diff_byte + 1])
        return start

    def find_short_successor(self, key: bytes) -> bytes:
        key = bytes(key)
        for i, byte in enumerate(key):
            if byte != 0xFF:
                return key[:i] + bytes([byte + 1])
        # A run of 0xff bytes has no shorter successor.
        return key


_BYTEWISE = BytewiseComparator()


def bytewise_comparator() -> BytewiseComparator:
    """Return the shared bytewise comparator."""
    return _BYTEWISE