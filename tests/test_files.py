import io
import mmap

import pytest

from lvutil.files import (
    WRITABLE_FILE_BUFFER_SIZE,
    FileLock,
    Limiter,
    MmapReadableFile,
    RandomAccessFile,
    SequentialFile,
    WritableFile,
)
from lvutil.status import StatusError

DATA = b"abcdefghijklmnopqrstuvwxyz"


def test_limiter_caps_acquires():
    limiter = Limiter(2)
    assert limiter.acquire() is True
    assert limiter.acquire() is True
    assert limiter.acquire() is False
    limiter.release()
    assert limiter.acquire() is True
    assert limiter.acquire() is False


def test_limiter_zero_never_acquires():
    limiter = Limiter(0)
    assert limiter.acquire() is False


def test_limiter_over_release_raises():
    limiter = Limiter(1)
    with pytest.raises(RuntimeError):
        limiter.release()


def test_limiter_negative_rejected():
    with pytest.raises(ValueError):
        Limiter(-1)


def test_sequential_read_and_skip():
    f = SequentialFile("seq", io.BytesIO(DATA))
    assert f.read(3) == b"abc"
    f.skip(2)
    assert f.read(3) == b"fgh"
    rest = f.read(100)
    assert rest == DATA[8:]
    assert f.read(10) == b""


def test_sequential_negative_read_rejected():
    f = SequentialFile("seq", io.BytesIO(DATA))
    with pytest.raises(ValueError):
        f.read(-1)


def test_random_access_reads_at_offsets():
    f = RandomAccessFile("ra", io.BytesIO(DATA))
    assert f.read(5, 3) == DATA[5:8]
    assert f.read(0, 2) == DATA[:2]
    assert f.read(24, 10) == DATA[24:]
    assert f.read(100, 4) == b""


def test_random_access_each_offset(tmp_path):
    path = tmp_path / "data.txt"
    path.write_bytes(DATA)
    with open(path, "rb") as stream:
        f = RandomAccessFile(str(path), stream)
        for i in range(9):
            assert f.read(i, 1) == DATA[i:i + 1]


def test_mmap_file_reads_and_releases(tmp_path):
    path = tmp_path / "mapped.txt"
    path.write_bytes(DATA)
    limiter = Limiter(1)
    assert limiter.acquire()
    with open(path, "rb") as stream:
        mapping = mmap.mmap(stream.fileno(), 0, access=mmap.ACCESS_READ)
    f = MmapReadableFile(str(path), mapping, limiter)
    assert f.read(3, 4) == DATA[3:7]
    assert limiter.acquire() is False
    f.close()
    assert limiter.acquire() is True


def test_mmap_read_past_end_is_io_error():
    limiter = Limiter(1)
    limiter.acquire()
    f = MmapReadableFile("mapped", DATA, limiter)
    with pytest.raises(StatusError) as info:
        f.read(20, 10)
    assert info.value.status.is_io_error()
    assert f.read(20, 6) == DATA[20:]


def test_writable_buffers_until_flush():
    stream = io.BytesIO()
    f = WritableFile("w", stream)
    f.append(b"hello ")
    f.append(b"world")
    assert stream.getvalue() == b""
    f.flush()
    assert stream.getvalue() == b"hello world"


def test_writable_overflow_keeps_order():
    stream = io.BytesIO()
    f = WritableFile("w", stream)
    first = b"a" * (WRITABLE_FILE_BUFFER_SIZE - 10)
    second = b"b" * 100
    f.append(first)
    f.append(second)
    f.flush()
    assert stream.getvalue() == first + second


def test_writable_close_and_sync_on_disk(tmp_path):
    path = tmp_path / "out.txt"
    f = WritableFile(str(path), open(path, "wb"))
    f.append(b"hello world!")
    f.sync()
    assert path.read_bytes() == b"hello world!"
    f.append(b"42")
    f.close()
    assert path.read_bytes() == b"hello world!42"


def test_writable_sync_without_descriptor_fails():
    f = WritableFile("mem", io.BytesIO())
    f.append(b"data")
    with pytest.raises(StatusError) as info:
        f.sync()
    assert info.value.status.is_io_error()


def test_file_lock_holds_name_and_stream():
    stream = io.BytesIO()
    lock = FileLock("LOCK", stream)
    assert lock.filename == "LOCK"
    assert lock.stream is stream