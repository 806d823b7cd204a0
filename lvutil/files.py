"""File objects for sequential, random-access, mapped and buffered writing I/O."""

from __future__ import annotations

import os
import threading
from typing import Any, BinaryIO

from lvutil.status import Status, StatusError

WRITABLE_FILE_BUFFER_SIZE = 65536


def _os_error(filename: str, exc: OSError) -> StatusError:
    message = exc.strerror or str(exc)
    if isinstance(exc, FileNotFoundError):
        return StatusError(Status.not_found(filename, message))
    return StatusError(Status.io_error(filename, message))


class Limiter:
    """Caps how many of a resource may be held at once."""

    def __init__(self, max_acquires: int) -> None:
        if max_acquires < 0:
            raise ValueError(f"max_acquires must not be negative, got {max_acquires}")
        self._max_acquires = max_acquires
        self._allowed = max_acquires
        self._lock = threading.Lock()

    def acquire(self) -> bool:
        """Take one resource if any is left; return whether one was taken."""
        with self._lock:
            if self._allowed > 0:
                self._allowed -= 1
                return True
            return False

    def release(self) -> None:
        """Give back a resource taken by a successful acquire."""
        with self._lock:
            if self._allowed >= self._max_acquires:
                raise RuntimeError("release called more times than acquire")
            self._allowed += 1


class _Closing:
    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class SequentialFile(_Closing):
    """A file read from start to end."""

    def __init__(self, filename: str, stream: BinaryIO) -> None:
        self.filename = filename
        self._stream = stream

    def read(self, n: int) -> bytes:
        """Read up to ``n`` bytes; an empty result means the end of the file."""
        if n < 0:
            raise ValueError(f"read size must not be negative, got {n}")
        try:
            return self._stream.read(n)
        except OSError as exc:
            raise _os_error(self.filename, exc) from exc

    def skip(self, n: int) -> None:
        """Move ``n`` bytes forward without reading them."""
        try:
            self._stream.seek(n, os.SEEK_CUR)
        except OSError as exc:
            raise _os_error(self.filename, exc) from exc

    def close(self) -> None:
        self._stream.close()


class RandomAccessFile(_Closing):
    """A file read at arbitrary offsets; safe to share between threads."""

    def __init__(self, filename: str, stream: BinaryIO) -> None:
        self.filename = filename
        self._stream = stream
        self._lock = threading.Lock()

    def read(self, offset: int, n: int) -> bytes:
        """Read up to ``n`` bytes at ``offset``; fewer come back near the end."""
        if offset < 0 or n < 0:
            raise ValueError("offset and size must not be negative")
        try:
            with self._lock:
                self._stream.seek(offset)
                return self._stream.read(n)
        except OSError as exc:
            raise _os_error(self.filename, exc) from exc

    def close(self) -> None:
        self._stream.close()


class MmapReadableFile(_Closing):
    """A random-access file served from a memory mapping of its contents."""

    def __init__(self, filename: str, mapping: Any, limiter: Limiter) -> None:
        self.filename = filename
        self._mapping = mapping
        self._length = len(mapping)
        self._limiter = limiter
        self._closed = False

    def read(self, offset: int, n: int) -> bytes:
        """Read exactly ``n`` bytes at ``offset``; reading past the end fails."""
        if offset < 0 or n < 0 or offset + n > self._length:
            raise StatusError(
                Status.io_error(self.filename, "The parameter is incorrect.")
            )
        return bytes(self._mapping[offset:offset + n])

    def close(self) -> None:
        """Unmap the contents and give back the mapping slot."""
        if self._closed:
            return
        self._closed = True
        close = getattr(self._mapping, "close", None)
        if close is not None:
            close()
        self._limiter.release()


class WritableFile(_Closing):
    """A file written sequentially through an in-memory buffer."""

    def __init__(self, filename: str, stream: BinaryIO) -> None:
        self.filename = filename
        self._stream = stream
        self._buffer = bytearray()

    def append(self, data) -> None:
        """Add ``data``; small writes are buffered, large ones go straight out."""
        data = memoryview(bytes(data))
        room = WRITABLE_FILE_BUFFER_SIZE - len(self._buffer)
        self._buffer += data[:room]
        rest = data[room:]
        if not rest:
            return
        self._flush_buffer()
        if len(rest) < WRITABLE_FILE_BUFFER_SIZE:
            self._buffer += rest
        else:
            self._write_unbuffered(rest)

    def flush(self) -> None:
        """Push buffered data to the underlying stream."""
        self._flush_buffer()

    def sync(self) -> None:
        """Push buffered data out and force it to stable storage."""
        self._flush_buffer()
        try:
            os.fsync(self._stream.fileno())
        except OSError as exc:
            raise _os_error(self.filename, exc) from exc

    def close(self) -> None:
        """Flush buffered data and close the stream."""
        try:
            self._flush_buffer()
        finally:
            try:
                self._stream.close()
            except OSError as exc:
                raise _os_error(self.filename, exc) from exc

    def _flush_buffer(self) -> None:
        data = bytes(self._buffer)
        self._buffer.clear()
        self._write_unbuffered(data)

    def _write_unbuffered(self, data) -> None:
        try:
            self._stream.write(data)
            self._stream.flush()
        except OSError as exc:
            raise _os_error(self.filename, exc) from exc


class FileLock:
    """A held lock on a file: the open stream and the name it was taken on."""

    def __init__(self, filename: str, stream: BinaryIO) -> None:
        self.filename = filename
        self.stream = stream

    def __repr__(self) -> str:
        return f"FileLock({self.filename!r})"