"""Writing HTTP/1.1 responses in order: status line, headers, body."""

from __future__ import annotations

import enum
from typing import BinaryIO

from httpfromtcp.headers import Headers


class StatusCode(enum.IntEnum):
    OK = 200
    BAD_REQUEST = 400
    INTERNAL_SERVER_ERROR = 500


_REASON_PHRASES = {
    StatusCode.OK: "OK",
    StatusCode.BAD_REQUEST: "Bad Request",
    StatusCode.INTERNAL_SERVER_ERROR: "Server Error",
}

_CHUNKED_END = b"0\r\n\r\n"


class OutOfOrderError(RuntimeError):
    """Raised when a part of the response is written out of order."""

    def __init__(self) -> None:
        super().__init__("out of order call")


class _Stage(enum.Enum):
    STATUS_LINE = enum.auto()
    HEADERS = enum.auto()
    BODY = enum.auto()


def default_headers(content_length: int) -> Headers:
    """Headers for a plain-text response of ``content_length`` bytes."""
    headers = Headers()
    headers["content-length"] = str(content_length)
    headers["connection"] = "close"
    headers["content-type"] = "text/plain"
    return headers


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")


class Writer:
    """Writes one response at a time to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self._stage = _Stage.STATUS_LINE

    def write_status_line(self, status_code: int) -> None:
        if self._stage is not _Stage.STATUS_LINE:
            raise OutOfOrderError()
        code = int(status_code)
        reason = _REASON_PHRASES.get(code, "")
        self.stream.write(_encode(f"HTTP/1.1 {code} {reason}\r\n"))
        self._stage = _Stage.HEADERS

    def write_headers(self, headers: Headers) -> None:
        if self._stage is not _Stage.HEADERS:
            raise OutOfOrderError()
        for name, value in headers.items():
            self.stream.write(_encode(f"{name}: {value}\r\n"))
        self.stream.write(b"\r\n")
        self._stage = _Stage.BODY

    def write_body(self, body: bytes) -> int:
        if self._stage is not _Stage.BODY:
            raise OutOfOrderError()
        self.stream.write(body)
        self._stage = _Stage.STATUS_LINE
        return len(body)

    def write(self, status_code: int, headers: Headers, body: bytes) -> None:
        """Write a complete response."""
        self.write_status_line(status_code)
        self.write_headers(headers)
        self.write_body(body)

    def write_chunked_body(self, data: bytes) -> int:
        """Write ``data`` as one chunk; an empty payload writes nothing."""
        if not data:
            return 0
        self.stream.write(f"{len(data):x}\r\n".encode("ascii") + bytes(data) + b"\r\n")
        return len(data)

    def write_chunked_body_done(self) -> int:
        """Write the terminating zero-length chunk."""
        self.stream.write(_CHUNKED_END)
        return len(_CHUNKED_END)