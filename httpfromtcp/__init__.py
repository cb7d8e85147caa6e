"""An HTTP/1.1 server built directly on TCP sockets, with TCP and UDP line tools."""

__version__ = "0.1.0"
__all__ = [
    "headers",
    "request",
    "response",
    "server",
    "httpserver",
    "tcplistener",
    "udpsender",
]