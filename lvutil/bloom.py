"""Filter policies, including a Bloom filter over byte-string keys."""

from __future__ import annotations

import abc
from collections.abc import Iterable

from lvutil.hashing import hash_bytes

_MASK32 = 0xFFFFFFFF
_BLOOM_SEED = 0xBC9F1D34


def _bloom_hash(key) -> int:
    return hash_bytes(key, _BLOOM_SEED)


class FilterPolicy(abc.ABC):
    """Builds compact summaries of key sets that answer "may contain"."""

    @abc.abstractmethod
    def name(self) -> str:
        """Name of the policy; changes whenever the filter encoding changes."""

    @abc.abstractmethod
    def create_filter(self, keys: Iterable[bytes]) -> bytes:
        """Return a filter summarising ``keys``."""

    @abc.abstractmethod
    def key_may_match(self, key: bytes, bloom_filter: bytes) -> bool:
        """Return False only if ``key`` was certainly not in the filter's keys."""


class BloomFilterPolicy(FilterPolicy):
    """Bloom filter using double hashing; the probe count is stored last."""

    def __init__(self, bits_per_key: int) -> None:
        self._bits_per_key = bits_per_key
        # Rounded down to reduce probing cost a little; 0.69 ~= ln(2).
        self._k = min(max(int(bits_per_key * 0.69), 1), 30)

    def name(self) -> str:
        return "leveldb.BuiltinBloomFilter2"

    def create_filter(self, keys: Iterable[bytes]) -> bytes:
        keys = list(keys)
        # A minimum length keeps the false positive rate sane for small sets.
        bits = max(len(keys) * self._bits_per_key, 64)
        num_bytes = (bits + 7) // 8
        bits = num_bytes * 8

        array = bytearray(num_bytes)
        for key in keys:
            h = _bloom_hash(key)
            delta = ((h >> 17) | (h << 15)) & _MASK32
            for _ in range(self._k):
                bitpos = h % bits
                array[bitpos // 8] |= 1 << (bitpos % 8)
                h = (h + delta) & _MASK32
        array.append(self._k)
        return bytes(array)

    def key_may_match(self, key: bytes, bloom_filter: bytes) -> bool:
        if len(bloom_filter) < 2:
            return False
        bits = 8 * (len(bloom_filter) - 1)
        k = bloom_filter[-1]

        h = _bloom_hash(key)
        delta = ((h >> 17) | (h << 15)) & _MASK32
        for _ in range(k):
            bitpos = h % bits
            if not bloom_filter[bitpos // 8] & (1 << (bitpos % 8)):
                return False
            h = (h + delta) & _MASK32
        return True


def new_bloom_filter_policy(bits_per_key: int) -> BloomFilterPolicy:
    """Return a Bloom filter policy using about ``bits_per_key`` bits per key."""
    return BloomFilterPolicy(bits_per_key)