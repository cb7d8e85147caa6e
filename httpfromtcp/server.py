"""A small TCP server that parses one HTTP/1.1 request per connection."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable

from httpfromtcp.request import Request, RequestError, request_from_reader
from httpfromtcp.response import StatusCode, Writer, default_headers

logger = logging.getLogger(__name__)

Handler = Callable[[Writer, Request], None]

_ACCEPT_POLL_SECONDS = 0.1


class _Connection:
    """Stream view of a connected socket: partial reads, complete writes."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def read(self, size: int) -> bytes:
        return self._sock.recv(size)

    def write(self, data: bytes) -> int:
        self._sock.sendall(data)
        return len(data)


def write_error(writer: Writer, status_code: int, message: str) -> None:
    """Write a complete plain-text response carrying ``message``."""
    body = message.encode("utf-8")
    writer.write_status_line(status_code)
    writer.write_headers(default_headers(len(body)))
    writer.write_body(body)


class Server:
    """Accepts connections in the background and hands each request to a handler."""

    def __init__(self, listener: socket.socket, handler: Handler) -> None:
        self.handler = handler
        self._listener = listener
        self._port = listener.getsockname()[1]
        self._closed = threading.Event()
        self._thread = threading.Thread(target=self._listen, daemon=True)

    @property
    def port(self) -> int:
        return self._port

    @property
    def addr(self) -> str:
        return f":{self._port}"

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def _start(self) -> None:
        self._thread.start()

    def close(self) -> None:
        """Stop accepting connections and release the listening socket."""
        self._closed.set()
        self._listener.close()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join()

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _listen(self) -> None:
        while not self._closed.is_set():
            try:
                conn, _ = self._listener.accept()
            except TimeoutError:
                continue
            except OSError as exc:
                if self._closed.is_set():
                    return
                logger.error("Error accepting connection: %s", exc)
                continue
            if self._closed.is_set():
                conn.close()
                return
            conn.settimeout(None)
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn:
            stream = _Connection(conn)
            writer = Writer(stream)
            try:
                request = request_from_reader(stream)
            except RequestError:
                try:
                    write_error(writer, StatusCode.BAD_REQUEST, "could not process request")
                except OSError as exc:
                    logger.error("error %s", exc)
                return
            try:
                self.handler(writer, request)
            except Exception:
                logger.exception("handler failed")


def serve(port: int, handler: Handler) -> Server:
    """Listen on ``port`` on all interfaces and serve requests with ``handler``."""
    listener = socket.create_server(("", port))
    listener.settimeout(_ACCEPT_POLL_SECONDS)
    server = Server(listener, handler)
    server._start()
    return server