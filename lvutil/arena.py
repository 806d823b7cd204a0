"""A bump allocator handing out slices of large, pre-allocated blocks."""

from __future__ import annotations

BLOCK_SIZE = 4096
_ALIGN = 8
_POINTER_SIZE = 8


class Arena:
    """Allocates writable byte regions from blocks that live as long as the arena."""

    def __init__(self) -> None:
        self._blocks: list[bytearray] = []
        self._block: bytearray | None = None
        self._offset = 0
        self._remaining = 0
        self._memory_usage = 0

    def allocate(self, size: int) -> memoryview:
        """Return a writable region of ``size`` bytes."""
        if size <= 0:
            raise ValueError(f"allocation size must be positive, got {size}")
        if size <= self._remaining:
            return self._take(0, size)
        return self._allocate_fallback(size)

    def allocate_aligned(self, size: int) -> memoryview:
        """Return a writable region of ``size`` bytes aligned to 8 bytes."""
        if size < 0:
            raise ValueError(f"allocation size must not be negative, got {size}")
        current_mod = self._offset & (_ALIGN - 1)
        slop = 0 if current_mod == 0 else _ALIGN - current_mod
        if size + slop <= self._remaining:
            return self._take(slop, size)
        return self._allocate_fallback(size)

    def memory_usage(self) -> int:
        """Estimated number of bytes held by the arena."""
        return self._memory_usage

    def _take(self, slop: int, size: int) -> memoryview:
        start = self._offset + slop
        self._offset = start + size
        self._remaining -= slop + size
        return memoryview(self._block)[start:start + size]

    def _allocate_fallback(self, size: int) -> memoryview:
        if size > BLOCK_SIZE // 4:
            # Large requests get a block of their own so the current block's
            # free space is not wasted.
            return memoryview(self._new_block(size))
        self._block = self._new_block(BLOCK_SIZE)
        self._offset = 0
        self._remaining = BLOCK_SIZE
        return self._take(0, size)

    def _new_block(self, block_bytes: int) -> bytearray:
        block = bytearray(block_bytes)
        self._blocks.append(block)
        self._memory_usage += block_bytes + _POINTER_SIZE
        return block