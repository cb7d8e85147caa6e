"""A TCP listener that prints every line each connection sends."""

from __future__ import annotations

import argparse
import logging
import socket
from collections.abc import Iterator
from typing import BinaryIO

logger = logging.getLogger(__name__)

PORT = 32020
_READ_SIZE = 8


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def iter_lines(stream: BinaryIO) -> Iterator[str]:
    """Yield newline-separated lines read from ``stream``.

    Complete lines are yielded without their newline; an unterminated last
    line is yielded with a newline appended. A read error ends the lines
    after that last one and is reported on standard output.
    """
    pending = b""
    while True:
        try:
            chunk = stream.read(_READ_SIZE)
        except OSError as exc:
            if pending:
                yield _decode(pending) + "\n"
            print(f"error: {exc}")
            return
        if not chunk:
            if pending:
                yield _decode(pending) + "\n"
            return
        *complete, pending = (pending + chunk).split(b"\n")
        for line in complete:
            yield _decode(line)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tcplistener", description=__doc__)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)

    try:
        listener = socket.create_server(("", args.port))
    except OSError as exc:
        logger.error("could not listen on port %d: %s", args.port, exc)
        return 1

    with listener:
        try:
            while True:
                try:
                    conn, address = listener.accept()
                except OSError as exc:
                    logger.error("could not accept incoming connection: %s", exc)
                    continue
                peer = f"{address[0]}:{address[1]}"
                print(f"connection from {peer} has been accepted")
                with conn, conn.makefile("rb", buffering=0) as stream:
                    for line in iter_lines(stream):
                        print(f"line: {line}")
                print(f"connection from {peer} has been closed")
        except KeyboardInterrupt:
            return 0


if __name__ == "__main__":
    raise SystemExit(main())