"""Incremental parsing of an HTTP/1.1 request from a byte stream."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import BinaryIO

from httpfromtcp.headers import HeaderError, Headers

_CRLF = b"\r\n"
_READ_SIZE = 4096
_SUPPORTED_METHODS = frozenset({"GET", "POST", "DELETE", "HEAD", "PUT"})
_DECIMAL = re.compile(r"[+-]?[0-9]+")


class RequestError(ValueError):
    """Raised when a request cannot be read or is malformed."""


class RequestState(enum.Enum):
    INITIALIZED = enum.auto()
    PARSING_HEADERS = enum.auto()
    PARSING_BODY = enum.auto()
    DONE = enum.auto()


@dataclass
class RequestLine:
    method: str
    request_target: str
    http_version: str


def parse_request_line(data: bytes) -> tuple[RequestLine | None, int]:
    """Parse the request line at the start of ``data``.

    Returns the parsed line and the bytes consumed, or ``(None, 0)`` while
    the line is still incomplete.
    """
    data = bytes(data)
    end = data.find(_CRLF)
    if end == -1:
        return None, 0

    line = data[:end].decode("utf-8", errors="surrogateescape")
    parts = line.split()
    if len(parts) != 3:
        raise RequestError(f"invalid number of parts in request line: {line}")

    method, target, version = parts
    if method not in _SUPPORTED_METHODS:
        raise RequestError(f"invalid HTTP method: {method}")
    if version != "HTTP/1.1":
        raise RequestError(f"unsupported HTTP version: {version}")

    return RequestLine(method=method, request_target=target, http_version="1.1"), end + 2


@dataclass
class Request:
    request_line: RequestLine | None = None
    headers: Headers = field(default_factory=Headers)
    body: bytearray = field(default_factory=bytearray)
    state: RequestState = RequestState.INITIALIZED
    content_length: int = 0

    @property
    def body_length(self) -> int:
        return len(self.body)

    def _parse(self, data: bytes) -> int:
        total = 0
        while self.state is not RequestState.DONE:
            consumed = self._parse_single(data[total:])
            if consumed == 0:
                break
            total += consumed
            if total == len(data):
                break
        return total

    def _parse_single(self, data: bytes) -> int:
        if self.state is RequestState.INITIALIZED:
            request_line, consumed = parse_request_line(data)
            if request_line is None:
                return 0
            self.request_line = request_line
            self.state = RequestState.PARSING_HEADERS
            return consumed

        if self.state is RequestState.PARSING_HEADERS:
            try:
                consumed, finished = self.headers.parse(data)
            except HeaderError as exc:
                raise RequestError(f"error parsing header: {exc}") from exc
            if consumed and finished:
                self._finish_headers()
            return consumed

        if self.state is RequestState.PARSING_BODY:
            self.body += data
            if self.body_length > self.content_length:
                raise RequestError("error parsing body: invalid body size")
            if self.body_length == self.content_length:
                self.state = RequestState.DONE
            return len(data)

        raise RequestError("parsing done")

    def _finish_headers(self) -> None:
        raw_length = self.headers.get("Content-Length")
        if raw_length is None:
            self.state = RequestState.DONE
            return
        if not _DECIMAL.fullmatch(raw_length):
            self.state = RequestState.DONE
            raise RequestError("invalid content-length: NaN")
        self.content_length = int(raw_length)
        self.state = RequestState.PARSING_BODY


def request_from_reader(reader: BinaryIO) -> Request:
    """Read and parse one request from ``reader``.

    ``reader.read(size)`` must return the bytes available, up to ``size``,
    and an empty result at end of stream.
    """
    request = Request()
    buffer = bytearray()

    while request.state is not RequestState.DONE:
        try:
            chunk = reader.read(_READ_SIZE)
        except OSError as exc:
            raise RequestError(f"error getting request from reader: {exc}") from exc
        if not chunk:
            if request.body_length != request.content_length:
                raise RequestError("invalid body size")
            request.state = RequestState.DONE
            break

        buffer += chunk
        consumed = request._parse(bytes(buffer))
        del buffer[:consumed]

    return request