"""Reference-counted LRU caches, plain and sharded by key hash."""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from lvutil.hashing import hash_bytes

Deleter = Callable[[bytes, Any], None]

_NUM_SHARD_BITS = 4
_NUM_SHARDS = 1 << _NUM_SHARD_BITS


@dataclass(eq=False)
class Handle:
    """An entry of the cache, pinned while a client holds a reference."""

    key: bytes
    value: Any
    hash_value: int
    charge: int
    deleter: Deleter | None
    refs: int = 1
    in_cache: bool = False


class LRUCache:
    """A single LRU cache; callers supply each key's hash.

    Entries with no client reference sit in the LRU list and are evicted
    oldest first once the total charge exceeds the capacity. Entries held
    by clients are never evicted, though they may be erased or replaced.
    """

    def __init__(self, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must not be negative, got {capacity}")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._usage = 0
        # Oldest entry first; entries here have refs == 1 and in_cache set.
        self._lru: OrderedDict[Handle, None] = OrderedDict()
        self._table: dict[tuple[int, bytes], Handle] = {}

    def insert(self, key: bytes, hash_value: int, value: Any, charge: int,
               deleter: Deleter | None = None) -> Handle:
        """Insert a mapping and return a handle the caller must release."""
        key = bytes(key)
        entry = Handle(key, value, hash_value, charge, deleter)
        with self._lock:
            if self.capacity > 0:
                entry.refs += 1
                entry.in_cache = True
                self._usage += charge
                self._finish_erase(self._table.pop((hash_value, key), None))
                self._table[(hash_value, key)] = entry
            while self._usage > self.capacity and self._lru:
                oldest = next(iter(self._lru))
                self._finish_erase(
                    self._table.pop((oldest.hash_value, oldest.key), None)
                )
        return entry

    def lookup(self, key: bytes, hash_value: int) -> Handle | None:
        """Return a pinned handle for ``key``, or None if it is not cached."""
        with self._lock:
            entry = self._table.get((hash_value, bytes(key)))
            if entry is not None:
                self._ref(entry)
            return entry

    def release(self, handle: Handle) -> None:
        """Drop a reference obtained from insert or lookup."""
        with self._lock:
            self._unref(handle)

    def erase(self, key: bytes, hash_value: int) -> None:
        """Remove ``key`` from the cache; clients holding it keep it alive."""
        with self._lock:
            self._finish_erase(self._table.pop((hash_value, bytes(key)), None))

    def prune(self) -> None:
        """Drop every entry not currently held by a client."""
        with self._lock:
            while self._lru:
                entry = next(iter(self._lru))
                self._finish_erase(
                    self._table.pop((entry.hash_value, entry.key), None)
                )

    def total_charge(self) -> int:
        with self._lock:
            return self._usage

    def _ref(self, entry: Handle) -> None:
        if entry.refs == 1 and entry.in_cache:
            self._lru.pop(entry, None)
        entry.refs += 1

    def _unref(self, entry: Handle) -> None:
        if entry.refs <= 0:
            raise ValueError("handle released more times than it was acquired")
        entry.refs -= 1
        if entry.refs == 0:
            if entry.deleter is not None:
                entry.deleter(entry.key, entry.value)
        elif entry.refs == 1 and entry.in_cache:
            self._lru[entry] = None

    def _finish_erase(self, entry: Handle | None) -> bool:
        if entry is None:
            return False
        self._lru.pop(entry, None)
        entry.in_cache = False
        self._usage -= entry.charge
        self._unref(entry)
        return True


class ShardedLRUCache:
    """An LRU cache split into shards by the top bits of each key's hash."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must not be negative, got {capacity}")
        per_shard = (capacity + _NUM_SHARDS - 1) // _NUM_SHARDS
        self._shards = [LRUCache(per_shard) for _ in range(_NUM_SHARDS)]
        self._id_lock = threading.Lock()
        self._last_id = 0

    @staticmethod
    def _hash(key: bytes) -> int:
        return hash_bytes(key, 0)

    def _shard(self, hash_value: int) -> LRUCache:
        return self._shards[hash_value >> (32 - _NUM_SHARD_BITS)]

    def insert(self, key: bytes, value: Any, charge: int,
               deleter: Deleter | None = None) -> Handle:
        hash_value = self._hash(key)
        return self._shard(hash_value).insert(key, hash_value, value, charge, deleter)

    def lookup(self, key: bytes) -> Handle | None:
        hash_value = self._hash(key)
        return self._shard(hash_value).lookup(key, hash_value)

    def release(self, handle: Handle) -> None:
        self._shard(handle.hash_value).release(handle)

    def erase(self, key: bytes) -> None:
        hash_value = self._hash(key)
        self._shard(hash_value).erase(key, hash_value)

    def value(self, handle: Handle) -> Any:
        return handle.value

    def new_id(self) -> int:
        """Return a fresh identifier, distinct from all earlier ones."""
        with self._id_lock:
            self._last_id += 1
            return self._last_id

    def prune(self) -> None:
        for shard in self._shards:
            shard.prune()

    def total_charge(self) -> int:
        return sum(shard.total_charge() for shard in self._shards)


def new_lru_cache(capacity: int) -> ShardedLRUCache:
    """Return a sharded LRU cache holding about ``capacity`` units of charge."""
    return ShardedLRUCache(capacity)