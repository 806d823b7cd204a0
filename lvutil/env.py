"""Access to the file system, threads and time, plus whole-file helpers."""

from __future__ import annotations

import contextlib
import mmap
import os
import queue
import sys
import tempfile
import threading
import time
from collections.abc import Callable
from typing import Any

from lvutil.files import (
    FileLock,
    Limiter,
    MmapReadableFile,
    RandomAccessFile,
    SequentialFile,
    WritableFile,
)
from lvutil.logger import Logger
from lvutil.status import Status, StatusError

if os.name == "nt":
    import msvcrt
else:
    import fcntl

# Up to 1000 mappings for 64-bit interpreters; none for 32-bit ones.
DEFAULT_MMAP_LIMIT = 1000 if sys.maxsize > 2**32 else 0
_READ_BUFFER_SIZE = 8192

_mmap_limit = DEFAULT_MMAP_LIMIT
_default_env: Env | None = None
_default_env_lock = threading.Lock()


def _error(context: str, exc: OSError) -> StatusError:
    message = exc.strerror or str(exc)
    if isinstance(exc, FileNotFoundError):
        return StatusError(Status.not_found(context, message))
    return StatusError(Status.io_error(context, message))


def _lock_stream(stream) -> None:
    if os.name == "nt":
        stream.seek(0)
        msvcrt.locking(stream.fileno(), msvcrt.LK_NBLCK, 1)
    else:
        fcntl.lockf(stream.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)


def _unlock_stream(stream) -> None:
    if os.name == "nt":
        stream.seek(0)
        msvcrt.locking(stream.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        fcntl.lockf(stream.fileno(), fcntl.LOCK_UN)


class Env:
    """Operating-system services used by the storage engine."""

    def __init__(self, mmap_limit: int | None = None) -> None:
        self._mmap_limiter = Limiter(_mmap_limit if mmap_limit is None else mmap_limit)
        self._work_queue: queue.Queue[tuple[Callable[..., Any], tuple]] = queue.Queue()
        self._background_lock = threading.Lock()
        self._started_background_thread = False
        self._locks_lock = threading.Lock()
        self._locked_files: set[str] = set()

    def new_sequential_file(self, filename: str) -> SequentialFile:
        try:
            stream = open(filename, "rb")
        except OSError as exc:
            raise _error(filename, exc) from exc
        return SequentialFile(filename, stream)

    def new_random_access_file(self, filename: str):
        """Open ``filename`` for reads at any offset, mapping it when a slot is free."""
        try:
            stream = open(filename, "rb")
        except OSError as exc:
            raise _error(filename, exc) from exc
        if not self._mmap_limiter.acquire():
            return RandomAccessFile(filename, stream)
        try:
            with stream:
                size = os.fstat(stream.fileno()).st_size
                if size == 0:
                    mapping: Any = b""
                else:
                    mapping = mmap.mmap(stream.fileno(), 0, access=mmap.ACCESS_READ)
        except OSError as exc:
            self._mmap_limiter.release()
            raise _error(filename, exc) from exc
        return MmapReadableFile(filename, mapping, self._mmap_limiter)

    def new_writable_file(self, filename: str) -> WritableFile:
        """Create ``filename``, truncating any existing contents."""
        try:
            stream = open(filename, "wb")
        except OSError as exc:
            raise _error(filename, exc) from exc
        return WritableFile(filename, stream)

    def new_appendable_file(self, filename: str) -> WritableFile:
        """Open ``filename`` for writing at its end, creating it if needed."""
        try:
            stream = open(filename, "ab")
        except OSError as exc:
            raise _error(filename, exc) from exc
        return WritableFile(filename, stream)

    def file_exists(self, filename: str) -> bool:
        return os.path.exists(filename)

    def get_children(self, directory: str) -> list[str]:
        try:
            return os.listdir(directory)
        except OSError as exc:
            raise _error(directory, exc) from exc

    def remove_file(self, filename: str) -> None:
        try:
            os.remove(filename)
        except OSError as exc:
            raise _error(filename, exc) from exc

    def create_dir(self, dirname: str) -> None:
        try:
            os.mkdir(dirname)
        except OSError as exc:
            raise _error(dirname, exc) from exc

    def remove_dir(self, dirname: str) -> None:
        try:
            os.rmdir(dirname)
        except OSError as exc:
            raise _error(dirname, exc) from exc

    def get_file_size(self, filename: str) -> int:
        try:
            return os.path.getsize(filename)
        except OSError as exc:
            raise _error(filename, exc) from exc

    def rename_file(self, src: str, target: str) -> None:
        """Rename ``src`` to ``target``, replacing ``target`` if it exists."""
        try:
            os.replace(src, target)
        except OSError as exc:
            raise _error(src, exc) from exc

    def lock_file(self, filename: str) -> FileLock:
        """Take an exclusive lock on ``filename``, creating it if needed."""
        try:
            stream = open(filename, "a+b")
        except OSError as exc:
            raise _error(filename, exc) from exc
        with self._locks_lock:
            if filename in self._locked_files:
                stream.close()
                raise StatusError(
                    Status.io_error("lock " + filename, "already held by process")
                )
            try:
                _lock_stream(stream)
            except OSError as exc:
                stream.close()
                raise _error("lock " + filename, exc) from exc
            self._locked_files.add(filename)
        return FileLock(filename, stream)

    def unlock_file(self, lock: FileLock) -> None:
        with self._locks_lock:
            try:
                _unlock_stream(lock.stream)
            except OSError as exc:
                raise _error("unlock " + lock.filename, exc) from exc
            self._locked_files.discard(lock.filename)
            lock.stream.close()

    def schedule(self, function: Callable[..., Any], *args) -> None:
        """Run ``function(*args)`` on the shared background thread, in order."""
        with self._background_lock:
            if not self._started_background_thread:
                self._started_background_thread = True
                threading.Thread(target=self._background_main, daemon=True).start()
            self._work_queue.put((function, args))

    def _background_main(self) -> None:
        while True:
            function, args = self._work_queue.get()
            function(*args)

    def start_thread(self, function: Callable[..., Any], *args) -> None:
        """Run ``function(*args)`` on a new detached thread."""
        threading.Thread(target=function, args=args, daemon=True).start()

    def get_test_directory(self) -> str:
        """Return a directory for temporary test files, creating it if needed."""
        configured = os.environ.get("TEST_TMPDIR")
        if configured:
            return configured
        result = os.path.join(
            tempfile.gettempdir(), f"leveldbtest-{threading.get_ident()}"
        )
        with contextlib.suppress(StatusError):
            self.create_dir(result)
        return result

    def new_logger(self, filename: str) -> Logger:
        try:
            stream = open(filename, "w", encoding="utf-8")
        except OSError as exc:
            raise _error(filename, exc) from exc
        return Logger(stream)

    def now_micros(self) -> int:
        return time.time_ns() // 1000

    def sleep_for_microseconds(self, micros: int) -> None:
        time.sleep(micros / 1_000_000)


def default_env() -> Env:
    """Return the process-wide environment, creating it on first use."""
    global _default_env
    with _default_env_lock:
        if _default_env is None:
            _default_env = Env()
        return _default_env


def set_read_only_mmap_limit(limit: int) -> None:
    """Set how many read-only files the default environment may map.

    Must be called before the default environment is created.
    """
    global _mmap_limit
    with _default_env_lock:
        if _default_env is not None:
            raise RuntimeError("the default environment is already initialized")
        _mmap_limit = limit


def _write_string_to_file(env: Env, data, filename: str, should_sync: bool) -> None:
    file = env.new_writable_file(filename)
    try:
        try:
            file.append(data)
            if should_sync:
                file.sync()
        finally:
            file.close()
    except StatusError:
        with contextlib.suppress(StatusError):
            env.remove_file(filename)
        raise


def write_string_to_file(env: Env, data, filename: str) -> None:
    _write_string_to_file(env, data, filename, False)


def write_string_to_file_sync(env: Env, data, filename: str) -> None:
    _write_string_to_file(env, data, filename, True)


def read_file_to_string(env: Env, filename: str) -> bytes:
    """Return the whole contents of ``filename``."""
    with env.new_sequential_file(filename) as file:
        return b"".join(iter(lambda: file.read(_READ_BUFFER_SIZE), b""))


def log(info_log: Logger | None, format: str, *args) -> None:
    """Write a message to ``info_log`` if there is one."""
    if info_log is not None:
        info_log.logv(format, *args)