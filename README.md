# lvutil

Building blocks for a log-structured key-value store, in plain Python with
no dependencies beyond the standard library.

## What is inside

| Module | Purpose |
| --- | --- |
| `lvutil.status` | `Status` values with a `Code`, and `StatusError` for raising a failed status |
| `lvutil.coding` | Little-endian fixed-width integers, varints and length-prefixed byte strings |
| `lvutil.hashing` | `hash_bytes`, a seeded 32-bit hash over bytes |
| `lvutil.rng` | `Random`, a small deterministic Park–Miller generator |
| `lvutil.textutil` | `number_to_string`, `escape_string`, `consume_decimal_number` |
| `lvutil.comparator` | `BytewiseComparator` with key-shortening helpers, shared via `bytewise_comparator()` |
| `lvutil.crc32c` | CRC-32C (`value`, `extend`) and checksum masking (`mask`, `unmask`) |
| `lvutil.arena` | `Arena`, a block allocator handing out writable `memoryview` regions and reporting its memory usage |
| `lvutil.bloom` | `FilterPolicy` and `BloomFilterPolicy` for building and probing bloom filters |
| `lvutil.cache` | `LRUCache` and `ShardedLRUCache` with reference-counted `Handle`s and deleters |
| `lvutil.logger` | `Logger`, timestamped, thread-tagged line logging to a text stream |
| `lvutil.files` | Sequential, random-access, memory-mapped and buffered writable files, plus `Limiter` and `FileLock` |
| `lvutil.env` | `Env` for file-system access, file locks, background work and time, and whole-file helpers |

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

Varints and fixed-width integers. Decoders take a buffer and an offset and
return the value together with the offset just past it; malformed or
truncated input raises `ValueError`:

```python
from lvutil.coding import decode_varint32, encode_fixed32, encode_varint32

data = encode_varint32(300) + encode_fixed32(7)
value, offset = decode_varint32(data, 0)
assert value == 300
```

Checksums:

```python
from lvutil import crc32c

crc = crc32c.value(b"hello world")
assert crc == crc32c.extend(crc32c.value(b"hello "), b"world")
assert crc32c.unmask(crc32c.mask(crc)) == crc
```

Bloom filters:

```python
from lvutil.bloom import new_bloom_filter_policy

policy = new_bloom_filter_policy(10)
bloom_filter = policy.create_filter([b"hello", b"world"])
assert policy.key_may_match(b"hello", bloom_filter)
```

An LRU cache whose entries stay pinned while a handle is held. The deleter
is called with the key and value once an entry has left the cache and every
handle to it has been released:

```python
from lvutil.cache import new_lru_cache

cache = new_lru_cache(1000)
handle = cache.insert(b"key", "value", 1, lambda key, value: None)
assert cache.value(handle) == "value"
cache.release(handle)
```

Files through the environment:

```python
from lvutil.env import default_env, read_file_to_string, write_string_to_file

env = default_env()
path = env.get_test_directory() + "/example.txt"
write_string_to_file(env, b"hello", path)
assert read_file_to_string(env, path) == b"hello"
env.remove_file(path)
```

`Env.new_random_access_file` serves files from a memory mapping while
mapping slots are free (1000 on 64-bit interpreters, none on 32-bit ones)
and falls back to plain reads afterwards. The default environment's limit
can be changed with `set_read_only_mmap_limit` before `default_env()` is
first called. `Env.schedule` runs work in order on one background thread;
`Env.start_thread` runs it on a new thread.

## Errors

Operations that fail raise `StatusError`. Its `status` attribute carries the
`Status`, which can be tested with `is_not_found()`, `is_io_error()` and the
other predicates, and rendered with `to_string()`, for example
`"NotFound: custom NotFound status message"`.

## What this package does not do

It provides the pieces a key-value store is built from, not the store
itself: there is no database to open, no tables or on-disk table format, no
write-ahead log, and no command-line tool.