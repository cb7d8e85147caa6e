import pytest

from httpfromtcp.headers import HeaderError, Headers, validate_field_name


def test_valid_single_header():
    headers = Headers()
    n, done = headers.parse(b"host: localhost:32020\r\n\r\n")
    assert headers["host"] == "localhost:32020"
    assert n == 23
    assert done is False


def test_spaces_between_name_and_colon_rejected():
    headers = Headers()
    with pytest.raises(HeaderError):
        headers.parse(b"       Host : localhost:32020       \r\n\r\n")
    assert headers == {}


def test_space_inside_field_name_rejected():
    headers = Headers()
    with pytest.raises(HeaderError):
        headers.parse(b"Ho st: localhost:32020\r\n\r\n")
    assert headers == {}


def test_empty_line_finishes_headers():
    headers = Headers()
    n, done = headers.parse(b"\r\n")
    assert n == 2
    assert done is True


def test_multiple_valid_headers():
    headers = Headers()
    data = b"Host: localhost:32020\r\nUser-Agent: Go-http-client/1.1\r\n\r\n"
    n, done = headers.parse(data)
    assert done is False
    assert headers["host"] == "localhost:32020"

    data = data[n:]
    n2, done = headers.parse(data)
    assert done is False
    assert headers["user-agent"] == "Go-http-client/1.1"

    data = data[n2:]
    n3, done = headers.parse(data)
    assert done is True
    assert n3 == 2


def test_extra_leading_and_trailing_whitespace():
    headers = Headers()
    n, done = headers.parse(b"    Connection:   keep-alive    \r\n\r\n")
    assert headers["connection"] == "keep-alive"
    assert n == 34
    assert done is False


def test_header_with_no_value():
    headers = Headers()
    n, done = headers.parse(b"X-Custom-Header: \r\n\r\n")
    assert headers["x-custom-header"] == ""
    assert n == 19
    assert done is False


def test_header_without_colon_rejected():
    headers = Headers()
    with pytest.raises(HeaderError, match="missing ':'"):
        headers.parse(b"InvalidHeader\r\n\r\n")


def test_header_with_only_whitespace_rejected():
    headers = Headers()
    with pytest.raises(HeaderError):
        headers.parse(b"       \r\n\r\n")


def test_non_token_character_rejected():
    headers = Headers()
    with pytest.raises(HeaderError):
        headers.parse("H©st: localhost:32020\r\n\r\n".encode("utf-8"))


def test_duplicate_headers_are_joined():
    headers = Headers()
    data = b"Set-person:peter\r\nSet-person:james\r\n\r\n"
    n, done = headers.parse(data)
    assert n == 18
    assert headers["set-person"] == "peter"
    assert done is False

    n2, done = headers.parse(data[n:])
    assert headers["set-person"] == "peter, james"
    assert n2 == 18
    assert done is False


def test_incomplete_line_consumes_nothing():
    headers = Headers()
    assert headers.parse(b"Host: localhost") == (0, False)
    assert headers == {}


def test_get_is_case_insensitive():
    headers = Headers()
    headers.parse(b"Content-Length: 13\r\n")
    assert headers.get("CONTENT-LENGTH") == "13"
    assert headers.get("content-length") == "13"


def test_get_missing_returns_default():
    headers = Headers()
    assert headers.get("Content-Length") is None
    assert headers.get("Content-Length", "0") == "0"


def test_set_lowercases_name_and_replaces_value():
    headers = Headers()
    headers.set("Content-Type", "text/html")
    headers.set("CONTENT-TYPE", "text/plain")
    assert headers == {"content-type": "text/plain"}


def test_validate_field_name_empty():
    with pytest.raises(HeaderError, match="empty"):
        validate_field_name("")


def test_validate_field_name_accepts_token_characters():
    validate_field_name("X-Custom_Header.1~")
    with pytest.raises(HeaderError):
        validate_field_name("X-Custom Header")