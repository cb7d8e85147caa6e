"""An HTTP server that serves static pages and proxies /httpbin/ requests."""

from __future__ import annotations

import argparse
import contextlib
import logging
import signal
import threading
import urllib.error
import urllib.request
from pathlib import Path

from httpfromtcp.headers import Headers
from httpfromtcp.request import Request
from httpfromtcp.response import StatusCode, Writer, default_headers
from httpfromtcp.server import serve, write_error

logger = logging.getLogger(__name__)

PORT = 32020
_PROXY_PREFIX = "/httpbin/"
_UPSTREAM = "https://httpbin.org/"
_PROXY_READ_SIZE = 32

_PAGES = {
    "/yourproblem": ("message1.html", StatusCode.BAD_REQUEST),
    "/myproblem": ("message2.html", StatusCode.INTERNAL_SERVER_ERROR),
}
_DEFAULT_PAGE = ("message3.html", StatusCode.OK)


def _proxy(w: Writer, target: str) -> None:
    url = _UPSTREAM + target[len(_PROXY_PREFIX):]
    logger.info("Proxying request for %s to %s", target, url)

    try:
        upstream = urllib.request.urlopen(url)
        status = upstream.status
    except urllib.error.HTTPError as exc:
        upstream = exc
        status = exc.code
    except (urllib.error.URLError, OSError, ValueError) as exc:
        logger.error("httpbin GET request failed for %s: %s", url, exc)
        try:
            write_error(w, StatusCode.INTERNAL_SERVER_ERROR, "Proxy request failed")
        except OSError as write_exc:
            logger.error("could not write proxy error response: %s", write_exc)
        return

    with contextlib.closing(upstream):
        headers = Headers()
        headers.set("transfer-encoding", "chunked")
        content_type = upstream.headers.get("Content-Type")
        if content_type:
            headers.set("content-type", content_type)
        headers.set("connection", "close")

        try:
            w.write_status_line(status)
            w.write_headers(headers)
        except OSError as exc:
            logger.error("could not write response head: %s", exc)
            return

        try:
            for chunk in iter(lambda: upstream.read(_PROXY_READ_SIZE), b""):
                logger.debug("Read %d bytes from httpbin", len(chunk))
                w.write_chunked_body(chunk)
        except OSError as exc:
            logger.error("error proxying body: %s", exc)
            return

        try:
            w.write_chunked_body_done()
        except OSError as exc:
            logger.error("error writing chunked body done: %s", exc)
        logger.info("Finished proxying %s", url)


def _serve_page(w: Writer, filename: str, status: StatusCode) -> None:
    try:
        body = Path(filename).read_bytes()
    except OSError:
        try:
            write_error(w, StatusCode.INTERNAL_SERVER_ERROR, "could not retrieve file")
        except OSError as exc:
            logger.error("could not write error: %s", exc)
        return

    headers = default_headers(len(body))
    headers.set("content-type", "text/html")
    try:
        w.write(status, headers, body)
    except OSError as exc:
        logger.error("could not write response: %s", exc)


def routing_handler(w: Writer, req: Request) -> None:
    """Route a request to the proxy or to one of the static pages."""
    target = req.request_line.request_target
    if target.startswith(_PROXY_PREFIX):
        _proxy(w, target)
        return
    filename, status = _PAGES.get(target, _DEFAULT_PAGE)
    _serve_page(w, filename, status)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="httpserver", description=__doc__)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        server = serve(args.port, routing_handler)
    except OSError as exc:
        logger.error("Error starting server: %s", exc)
        return 1

    stop = threading.Event()

    def _on_signal(signum, frame):
        stop.set()

    previous = {sig: signal.signal(sig, _on_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    with server:
        logger.info("Server started on port %d", server.port)
        try:
            while not stop.wait(0.5):
                pass
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)
    logger.info("Server gracefully stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())