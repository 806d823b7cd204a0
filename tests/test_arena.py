import pytest

from lvutil.arena import Arena
from lvutil.rng import Random


def test_empty_arena_uses_no_memory():
    assert Arena().memory_usage() == 0


def test_simple():
    allocated = []
    arena = Arena()
    n = 100000
    total = 0
    rnd = Random(301)
    for i in range(n):
        if i % (n // 10) == 0:
            s = i
        elif rnd.one_in(4000):
            s = rnd.uniform(6000)
        elif rnd.one_in(10):
            s = rnd.uniform(100)
        else:
            s = rnd.uniform(20)
        if s == 0:
            s = 1
        if rnd.one_in(10):
            region = arena.allocate_aligned(s)
        else:
            region = arena.allocate(s)
        assert len(region) == s
        region[:] = bytes((i % 256,)) * s
        total += s
        allocated.append((i, s, region))
        assert arena.memory_usage() >= total
        if i > n // 10:
            assert arena.memory_usage() <= total * 1.10

    expected = [bytes((index % 256,)) * size for index, size, _ in allocated]
    actual = [bytes(region) for _, _, region in allocated]
    assert actual == expected


def test_allocate_zero_raises():
    with pytest.raises(ValueError):
        Arena().allocate(0)


def test_allocate_aligned_negative_raises():
    with pytest.raises(ValueError):
        Arena().allocate_aligned(-1)


def test_aligned_allocation_uses_slop_within_block():
    arena = Arena()
    arena.allocate(1)
    assert arena.memory_usage() == 4096 + 8
    arena.allocate_aligned(8)
    # 1 byte + 7 bytes slop + 8 bytes used: 4080 left in the block.
    arena.allocate(4080)
    assert arena.memory_usage() == 4096 + 8
    arena.allocate(1)
    assert arena.memory_usage() == 2 * (4096 + 8)


def test_large_allocation_gets_own_block():
    arena = Arena()
    region = arena.allocate(2000)
    assert len(region) == 2000
    assert arena.memory_usage() == 2000 + 8
    arena.allocate(10)
    assert arena.memory_usage() == 2000 + 8 + 4096 + 8


def test_regions_do_not_overlap():
    arena = Arena()
    first = arena.allocate(10)
    second = arena.allocate_aligned(10)
    first[:] = b"a" * 10
    second[:] = b"b" * 10
    assert bytes(first) == b"a" * 10
    assert bytes(second) == b"b" * 10