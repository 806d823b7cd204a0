"""A small deterministic pseudo-random number generator (Park-Miller)."""

from __future__ import annotations

_M = 2147483647  # 2**31 - 1
_A = 16807


class Random:
    """Minimal-standard Lehmer generator; not suitable for cryptography."""

    def __init__(self, seed: int) -> None:
        self._seed = seed & 0x7FFFFFFF
        if self._seed in (0, _M):
            self._seed = 1

    def next(self) -> int:
        """Return the next value, in the range [1, 2**31 - 2]."""
        product = self._seed * _A
        seed = (product >> 31) + (product & _M)
        if seed > _M:
            seed -= _M
        self._seed = seed
        return seed

    def uniform(self, n: int) -> int:
        """Return a value uniformly distributed in [0, n - 1]."""
        if n <= 0:
            raise ValueError(f"n must be positive, got {n}")
        return self.next() % n

    def one_in(self, n: int) -> bool:
        """Return True roughly once in every ``n`` calls."""
        if n <= 0:
            raise ValueError(f"n must be positive, got {n}")
        return self.next() % n == 0

    def skewed(self, max_log: int) -> int:
        """Return a value in [0, 2**max_log - 1], biased towards small numbers."""
        return self.uniform(1 << self.uniform(max_log + 1))