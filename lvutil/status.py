"""Result status values and the exception that carries them."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Code(enum.IntEnum):
    """Kinds of outcome a status can describe."""

    OK = 0
    NOT_FOUND = 1
    CORRUPTION = 2
    NOT_SUPPORTED = 3
    INVALID_ARGUMENT = 4
    IO_ERROR = 5


_PREFIXES = {
    Code.NOT_FOUND: "NotFound: ",
    Code.CORRUPTION: "Corruption: ",
    Code.NOT_SUPPORTED: "Not implemented: ",
    Code.INVALID_ARGUMENT: "Invalid argument: ",
    Code.IO_ERROR: "IOError: ",
}


def _join(msg: str, msg2: str) -> str:
    return f"{msg}: {msg2}" if msg2 else msg


@dataclass(frozen=True)
class Status:
    """The outcome of an operation: a code and, on failure, a message."""

    code: Code = Code.OK
    message: str = ""

    @classmethod
    def ok(cls) -> Status:
        return cls(Code.OK)

    @classmethod
    def not_found(cls, msg: str, msg2: str = "") -> Status:
        return cls(Code.NOT_FOUND, _join(msg, msg2))

    @classmethod
    def corruption(cls, msg: str, msg2: str = "") -> Status:
        return cls(Code.CORRUPTION, _join(msg, msg2))

    @classmethod
    def not_supported(cls, msg: str, msg2: str = "") -> Status:
        return cls(Code.NOT_SUPPORTED, _join(msg, msg2))

    @classmethod
    def invalid_argument(cls, msg: str, msg2: str = "") -> Status:
        return cls(Code.INVALID_ARGUMENT, _join(msg, msg2))

    @classmethod
    def io_error(cls, msg: str, msg2: str = "") -> Status:
        return cls(Code.IO_ERROR, _join(msg, msg2))

    def is_ok(self) -> bool:
        return self.code is Code.OK

    def is_not_found(self) -> bool:
        return self.code is Code.NOT_FOUND

    def is_corruption(self) -> bool:
        return self.code is Code.CORRUPTION

    def is_not_supported(self) -> bool:
        return self.code is Code.NOT_SUPPORTED

    def is_invalid_argument(self) -> bool:
        return self.code is Code.INVALID_ARGUMENT

    def is_io_error(self) -> bool:
        return self.code is Code.IO_ERROR

    def to_string(self) -> str:
        """Render the status the way it is shown to users."""
        if self.code is Code.OK:
            return "OK"
        return _PREFIXES[self.code] + self.message

    def __str__(self) -> str:
        return self.to_string()


class StatusError(Exception):
    """Raised when an operation ends with a non-OK status."""

    def __init__(self, status: Status) -> None:
        super().__init__(status.to_string())
        self.status = status