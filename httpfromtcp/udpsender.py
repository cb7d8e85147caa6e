"""Send each line typed on standard input as one UDP datagram."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Iterable, Iterator
from typing import TextIO

logger = logging.getLogger(__name__)

HOST = "127.0.0.1"
PORT = 32020


def send_lines(lines: Iterable[str | bytes], address: tuple[str, int]) -> int:
    """Send every line to ``address`` as its own datagram; return how many were sent."""
    host, port = address
    family, kind, proto, _, sockaddr = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0]
    count = 0
    with socket.socket(family, kind, proto) as sock:
        sock.connect(sockaddr)
        for line in lines:
            data = line if isinstance(line, bytes) else line.encode("utf-8")
            sock.send(data)
            count += 1
    return count


def _prompted_lines(stdin: TextIO) -> Iterator[str]:
    while True:
        print(">", flush=True)
        line = stdin.readline()
        if not line.endswith("\n"):
            raise EOFError("EOF")
        yield line


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="udpsender", description=__doc__)
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)

    try:
        send_lines(_prompted_lines(sys.stdin), (args.host, args.port))
    except EOFError as exc:
        logger.error("Error reading from stdin %s", exc)
    except OSError as exc:
        logger.error("Error writing to UDP %s", exc)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())