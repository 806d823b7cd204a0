"""A logger writing timestamped, thread-tagged lines to a text stream."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import TextIO

_MAX_THREAD_ID_SIZE = 32


class Logger:
    """Writes one line per message and owns the stream it writes to."""

    def __init__(self, stream: TextIO) -> None:
        if stream is None:
            raise ValueError("logger needs a stream")
        self._stream = stream
        self._lock = threading.Lock()

    def logv(self, format: str, *args) -> None:
        """Format ``format % args`` and write it with a time and thread header."""
        now = datetime.now()
        thread_id = str(threading.get_ident())[:_MAX_THREAD_ID_SIZE]
        micros = now.microsecond // 1000 * 1000
        header = (
            f"{now.year:04d}/{now.month:02d}/{now.day:02d}-"
            f"{now.hour:02d}:{now.minute:02d}:{now.second:02d}.{micros:06d} "
            f"{thread_id} "
        )
        line = header + (format % args)
        if not line.endswith("\n"):
            line += "\n"
        with self._lock:
            self._stream.write(line)
            self._stream.flush()

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()