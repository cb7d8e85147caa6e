# httpfromtcp

An HTTP/1.1 server written directly on top of TCP sockets. It does its own
request parsing, header handling and response writing. The package also has
two small networking tools for watching raw traffic. It has no third-party
dependencies.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Commands

### `httpfromtcp-server [--port PORT]`

Starts the HTTP server. The default port is 32020. The server runs until it
receives SIGINT or SIGTERM, then closes its listener and exits. Routes:

- `/yourproblem` returns `message1.html` with status `400 Bad Request`.
- `/myproblem` returns `message2.html` with status `500 Server Error`.
- `/httpbin/<path>` fetches `https://httpbin.org/<path>` and streams the reply
  back with `transfer-encoding: chunked`. The upstream status code and
  `Content-Type` are passed through. If the upstream request fails, the client
  gets `500` with the body `Proxy request failed`.
- Any other path returns `message3.html` with status `200 OK`.

The HTML files are read from the current working directory. If a file cannot
be read, the client gets `500` with the body `could not retrieve file`. A
request that cannot be parsed is answered with `400` and the body
`could not process request`.

### `httpfromtcp-tcplistener [--port PORT]`

Listens on TCP (default port 32020) and handles one connection at a time. For
each connection it prints when the connection is accepted, prints
`line: <text>` for every newline-terminated line received, and prints when the
connection is closed. Stop it with Ctrl-C.

### `httpfromtcp-udpsender [--host HOST] [--port PORT]`

Prints a `>` prompt, reads a line from standard input, and sends it, newline
included, as one UDP datagram. The default address is `127.0.0.1:32020`. The
loop repeats until standard input ends. End of input is logged as an error,
and the command exits with status 1.

## Library use

```python
import io

from httpfromtcp.request import request_from_reader

raw = b"POST /submit HTTP/1.1\r\nHost: localhost\r\nContent-Length: 5\r\n\r\nhello"
req = request_from_reader(io.BytesIO(raw))
print(req.request_line.method, req.request_line.request_target, bytes(req.body))
```

### `httpfromtcp.headers`

- `Headers` is a `dict` with lower-case field names as keys.
- `Headers.parse(data)` parses one field line. It returns
  `(bytes_consumed, done)`. It returns `(0, False)` while no full CRLF-terminated
  line is available. It returns `(2, True)` at the blank line that ends the
  headers.
- Repeated fields are joined with `", "`.
- `Headers.get(name, default=None)` and `Headers.set(name, value)` take field
  names in any case.
- A line without `:`, or a field name that is empty or contains anything
  outside the token characters, raises `HeaderError`. That includes a space
  before the colon.
- `validate_field_name` runs the name check on its own.

### `httpfromtcp.request`

- `request_from_reader(reader)` reads from any object whose `read(size)`
  returns the bytes available and an empty result at end of stream. It returns
  a `Request` with these fields:
  - `request_line`, a `RequestLine` with `method`, `request_target` and
    `http_version` (`"1.1"`);
  - `headers`;
  - `body`;
  - `state`, a `RequestState`;
  - `content_length`.
- `request_from_reader` raises `RequestError` in these cases:
  - the request line does not have exactly three parts;
  - the method is not one of GET, POST, DELETE, HEAD or PUT;
  - the version is not `HTTP/1.1`;
  - a header line is invalid;
  - `Content-Length` is not a whole number;
  - the body is longer or shorter than `Content-Length`.
- If the stream ends before the blank line that closes the headers, the request
  is still returned, holding the headers read so far.
- `parse_request_line(data)` parses the request line alone.

### `httpfromtcp.response`

- `Writer(stream)` writes to a binary stream and enforces the order status
  line, headers, body. A call out of that order raises `OutOfOrderError`.
- `Writer.write(status_code, headers, body)` writes a whole response.
- `write_chunked_body(data)` and `write_chunked_body_done()` produce chunked
  transfer encoding. An empty chunk is not written.
- `StatusCode` defines `OK`, `BAD_REQUEST` and `INTERNAL_SERVER_ERROR`. Other
  codes are written with an empty reason phrase.
- `default_headers(content_length)` builds `content-length`,
  `connection: close` and `content-type: text/plain`.

### `httpfromtcp.server`

- `serve(port, handler)` listens on all interfaces and returns a running
  `Server`. Each connection is handled on its own thread.
- The handler is called as `handler(writer, request)`.
- `Server` has `port`, `addr` and `closed`. It can be used as a context
  manager, and `Server.close()` stops it.
- `write_error(writer, status_code, message)` writes a complete plain-text
  response.

## Limitations

- Each connection carries exactly one request. There is no keep-alive and no
  pipelining.
- Request bodies are read only by `Content-Length`. Chunked request bodies are
  not supported.
- There is no TLS.
- The server's routes are fixed in `httpfromtcp.httpserver.routing_handler`.
  There is no configuration file.